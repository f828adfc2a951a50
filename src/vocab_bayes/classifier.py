"""Inference with a trained Naive Bayes model.

A document is scored against every class as the class log-prior plus the
log-likelihood of each in-vocabulary token (once per occurrence). Tokens
outside the vocabulary contribute nothing. The prediction is the *set* of
classes reaching the maximum score, so ties are reported rather than broken.

Scores are summed with :func:`math.fsum`, which is exact up to the final
rounding; two classes whose terms form the same multiset therefore tie
regardless of the order the terms were added in.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .config import TrainingConfig
from .models import Document, Model
from .observers import TrainingObserver
from .trainer import train

logger = logging.getLogger(__name__)


def score(model: Model, document: Document) -> dict[str, float]:
    """Compute the unnormalized log score of ``document`` for each class."""
    tokens = [w for w in document.words() if w in model.vocab]
    scores: dict[str, float] = {}
    for label in sorted(model.classes):
        terms = [model.log_prior[label]]
        terms.extend(model.log_likelihood[(label, w)] for w in tokens)
        scores[label] = math.fsum(terms)
    return scores


def argmax_all(scores: Mapping[str, float]) -> set[str]:
    """Return every key whose value equals the maximum value.

    An empty mapping gives an empty set.
    """
    if not scores:
        return set()
    best = max(scores.values())
    return {label for label, value in scores.items() if value == best}


def classify(model: Model, document: Document) -> set[str]:
    """Predict the best-scoring classes for ``document``.

    Returns:
        All classes tied at the maximum score. Empty when the model has no
        classes.
    """
    return argmax_all(score(model, document))


def classify_batch(
    model: Model,
    documents: Iterable[Document],
    *,
    workers: int = 1,
) -> list[set[str]]:
    """Classify several documents, preserving input order."""
    documents = list(documents)
    if workers > 1 and len(documents) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda doc: classify(model, doc), documents))
    return [classify(model, doc) for doc in documents]


def most_informative_words(
    model: Model,
    label: str,
    top_n: int = 20,
) -> list[tuple[str, float]]:
    """Return the words most indicative of ``label``.

    Measures how much larger a word's log-likelihood is under ``label``
    than its average log-likelihood under the other classes. A word whose
    likelihoods are ``-inf`` everywhere (integer division) ranks at ``0.0``.

    Args:
        model: Trained model.
        label: Target class.
        top_n: Number of words to return.

    Returns:
        List of (word, log_likelihood_ratio) tuples, sorted by ratio
        (descending, ties broken alphabetically).

    Raises:
        ValueError: If ``label`` is not one of the model's classes.
    """
    if label not in model.classes:
        raise ValueError(f"Unknown class: {label}. Known: {sorted(model.classes)}")

    others = sorted(c for c in model.classes if c != label)
    ratios: list[tuple[str, float]] = []
    for word in sorted(model.vocab):
        target = model.log_likelihood[(label, word)]
        if not others:
            ratios.append((word, round(target, 4)))
            continue
        avg_other = sum(model.log_likelihood[(c, word)] for c in others) / len(others)
        if target == avg_other:
            # equal infinities from integer division carry no preference
            ratio = 0.0
        else:
            ratio = target - avg_other
        ratios.append((word, round(ratio, 4)))

    ratios.sort(key=lambda x: (-x[1], x[0]))
    return ratios[:top_n]


# ---------------------------------------------------------------------------
# High-level API
# ---------------------------------------------------------------------------

class NaiveBayes:
    """Train-then-guess wrapper around :func:`train` and :func:`classify`.

    Example::

        nb = NaiveBayes()
        nb.train(documents, vocab={"good", "bad"})
        nb.guess(Document(label="", text="good"))   # {"pos"}

    Args:
        config: Division mode and worker count (defaults to real division,
            sequential training).
        observer: Optional training progress observer.
    """

    def __init__(
        self,
        config: Optional[TrainingConfig] = None,
        observer: Optional[TrainingObserver] = None,
    ) -> None:
        self.config = config or TrainingConfig()
        self._observer = observer
        self._model: Optional[Model] = None

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    @property
    def model(self) -> Model:
        """The trained model.

        Raises:
            RuntimeError: If :meth:`train` has not been called.
        """
        if self._model is None:
            raise RuntimeError("Classifier not trained. Call train() first.")
        return self._model

    @property
    def classes(self) -> list[str]:
        if self._model is None:
            return []
        return sorted(self._model.classes)

    @property
    def vocab(self) -> frozenset[str]:
        if self._model is None:
            return frozenset()
        return self._model.vocab

    def train(
        self,
        documents: Sequence[Document],
        vocab: Iterable[str],
        classes: Optional[Iterable[str]] = None,
    ) -> "NaiveBayes":
        """Train on labeled documents.

        Args:
            documents: Labeled training documents.
            vocab: Feature vocabulary.
            classes: Class set. Defaults to the distinct document labels.

        Returns:
            Self (for method chaining).
        """
        documents = list(documents)
        if classes is None:
            classes = {doc.label for doc in documents}
        self._model = train(
            documents,
            classes,
            vocab,
            division=self.config.division,
            observer=self._observer,
            workers=self.config.workers,
        )
        logger.info(
            "Trained model: %d classes, %d likelihoods",
            len(self._model.classes), self._model.size,
        )
        return self

    def scores(self, document: Document) -> dict[str, float]:
        return score(self.model, document)

    def guess(self, document: Document) -> set[str]:
        """Predict the best-scoring classes for a document."""
        return classify(self.model, document)

    def guess_batch(self, documents: Iterable[Document]) -> list[set[str]]:
        return classify_batch(self.model, documents, workers=self.config.workers)

    def most_informative_words(
        self,
        label: str,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        return most_informative_words(self.model, label, top_n)
