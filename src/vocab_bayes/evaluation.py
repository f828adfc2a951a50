"""Hold-out evaluation of a trained model.

The classifier predicts label *sets*. For scoring, each set is resolved to a
single label: a one-element set counts as that label, while ties and empty
sets become :data:`AMBIGUOUS`, a pseudo-label that is always a miss and never
gets a row of its own.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from .classifier import classify_batch
from .models import Document, Model

AMBIGUOUS = "<ambiguous>"


@dataclass
class ClassificationMetrics:
    """Scores of resolved predictions against true labels.

    Per-class figures exist only for labels that occur among the true
    labels. ``AMBIGUOUS`` shows up as a column of ``confusion_matrix`` and in
    ``ambiguous``, so a model that ties everywhere scores zero recall
    instead of disappearing from the report.

    Attributes:
        accuracy: Share of documents whose prediction was exactly ``{label}``.
        per_class: ``{label: {"precision", "recall", "f1"}}``.
        macro_precision: Mean of ``per_class`` precisions.
        macro_recall: Mean of ``per_class`` recalls.
        macro_f1: Mean of ``per_class`` F1 scores.
        weighted_f1: F1 averaged with each label weighted by its support.
        confusion_matrix: ``{true: {resolved prediction: count}}``.
        support: Number of documents per true label.
        ambiguous: Number of tied or empty predictions.
    """

    accuracy: float = 0.0
    per_class: dict[str, dict[str, float]] = field(default_factory=dict)
    macro_precision: float = 0.0
    macro_recall: float = 0.0
    macro_f1: float = 0.0
    weighted_f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)
    ambiguous: int = 0

    def to_dict(self) -> dict:
        rounded = {
            name: round(getattr(self, name), 4)
            for name in ("accuracy", "macro_precision", "macro_recall", "macro_f1", "weighted_f1")
        }
        rounded["ambiguous"] = self.ambiguous
        rounded["per_class"] = {
            label: {k: round(v, 4) for k, v in scores.items()}
            for label, scores in self.per_class.items()
        }
        rounded["confusion_matrix"] = self.confusion_matrix
        return rounded

    def summary(self) -> str:
        """Plain-text report: headline figures, then one row per true label."""
        header = f"{'Label':<20} {'Precision':>10} {'Recall':>10} {'F1':>10} {'Docs':>8}"
        rows = [
            f"Accuracy: {self.accuracy:.2%}",
            f"Macro F1: {self.macro_f1:.4f} | Weighted F1: {self.weighted_f1:.4f}",
            f"Ambiguous: {self.ambiguous}",
            "",
            header,
            "-" * len(header),
        ]
        for label, scores in sorted(self.per_class.items()):
            rows.append(
                f"{label:<20} {scores['precision']:>10.4f} {scores['recall']:>10.4f} "
                f"{scores['f1']:>10.4f} {self.support.get(label, 0):>8}"
            )
        return "\n".join(rows)


def resolve_prediction(labels: Iterable[str]) -> str:
    """Collapse a predicted label set to one label, or ``AMBIGUOUS``."""
    labels = set(labels)
    if len(labels) == 1:
        return next(iter(labels))
    return AMBIGUOUS


def _ratio(num: float, den: float) -> float:
    return num / den if den else 0.0


def compute_metrics(
    y_true: list[str],
    y_pred: list[str],
) -> ClassificationMetrics:
    """Score resolved predictions against their true labels.

    Args:
        y_true: True label of each document.
        y_pred: Resolved prediction of each document; may be ``AMBIGUOUS``.

    Raises:
        ValueError: If the two lists differ in length.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    labels = sorted(set(y_true))
    columns = sorted(set(y_true) | set(y_pred))
    pairs = Counter(zip(y_true, y_pred))
    matrix = {t: {p: pairs[(t, p)] for p in columns} for t in labels}
    support = Counter(y_true)
    predicted = Counter(y_pred)

    per_class: dict[str, dict[str, float]] = {}
    for label in labels:
        hits = pairs[(label, label)]
        # the AMBIGUOUS column never counts toward any label's precision
        precision = _ratio(hits, predicted[label])
        recall = _ratio(hits, support[label])
        per_class[label] = {
            "precision": precision,
            "recall": recall,
            "f1": _ratio(2 * precision * recall, precision + recall),
        }

    def mean(key: str) -> float:
        return _ratio(sum(s[key] for s in per_class.values()), len(per_class))

    return ClassificationMetrics(
        accuracy=_ratio(sum(pairs[(t, t)] for t in labels), len(y_true)),
        per_class=per_class,
        macro_precision=mean("precision"),
        macro_recall=mean("recall"),
        macro_f1=mean("f1"),
        weighted_f1=_ratio(
            sum(per_class[t]["f1"] * support[t] for t in labels), len(y_true)
        ),
        confusion_matrix=matrix,
        support=dict(support),
        ambiguous=predicted[AMBIGUOUS],
    )


def evaluate(
    model: Model,
    documents: Iterable[Document],
    *,
    workers: int = 1,
) -> ClassificationMetrics:
    """Classify labeled documents and score the predictions against their labels."""
    documents = list(documents)
    predictions = classify_batch(model, documents, workers=workers)
    y_true = [doc.label for doc in documents]
    y_pred = [resolve_prediction(p) for p in predictions]
    return compute_metrics(y_true, y_pred)
