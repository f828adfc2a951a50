"""Multinomial Naive Bayes training over a fixed vocabulary.

Each class is trained independently: its documents are tokenized into one
word multiset, every vocabulary word gets an add-one smoothed count, and the
class prior and per-word likelihoods are derived from those counts. The
per-class results are merged into the model maps only once every class is
done, so the per-class pass can run on a thread pool without shared state.

All quantities are base-2 logarithms:

- ``log_prior(c) = log2(N / N_c)``
- ``log_likelihood(c, w) = log2((count(w, c) + 1) / sum_v (count(v, c) + 1))``
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .models import DivisionMode, Document, Model
from .observers import TrainingObserver

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TrainingError(ValueError):
    """Training inputs were rejected before any computation."""


class EmptyDocumentsError(TrainingError):
    """No training documents were supplied."""


class EmptyVocabularyError(TrainingError):
    """The vocabulary is empty, so every class word total would be zero."""


class UnknownClassError(TrainingError):
    """A training document is labeled with a class outside the class set."""


class DegenerateClassError(TrainingError):
    """A class has no training documents, so its prior is undefined."""


# ---------------------------------------------------------------------------
# Per-class statistics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClassStatistics:
    """Everything the per-class pass computes for one class.

    Attributes:
        label: Class label.
        document_count: ``N_c``, number of training documents in the class.
        word_counts: Raw ``count(v, c)`` for each vocabulary word.
        word_total: ``sum_v (count(v, c) + 1)``.
        log_prior: ``log2(N / N_c)``.
        log_likelihood: Smoothed log-likelihood per vocabulary word.
    """

    label: str
    document_count: int
    word_counts: dict[str, int]
    word_total: int
    log_prior: float
    log_likelihood: dict[str, float]


def log2_ratio(numerator: int, denominator: int, division: DivisionMode) -> float:
    """Return ``log2(numerator / denominator)`` under the given division mode.

    In ``INTEGER`` mode the quotient is floored first; a zero quotient gives
    ``-inf`` instead of raising.

    Raises:
        ZeroDivisionError: If ``denominator`` is zero.
    """
    if division is DivisionMode.INTEGER:
        quotient = numerator // denominator
        if quotient == 0:
            return -math.inf
        return math.log2(quotient)
    return math.log2(numerator / denominator)


def train_class(
    label: str,
    documents: Sequence[Document],
    total_documents: int,
    vocab: Iterable[str],
    division: DivisionMode = DivisionMode.REAL,
    observer: TrainingObserver | None = None,
) -> ClassStatistics:
    """Compute prior and likelihoods for a single class.

    Args:
        label: The class being trained.
        documents: The training documents labeled ``label``.
        total_documents: ``N``, the size of the whole training set.
        vocab: Vocabulary words, in the order progress events are reported.
        division: Division mode for the prior and the likelihoods.
        observer: Optional progress observer.

    Returns:
        ClassStatistics for ``label``.
    """
    observer = observer or TrainingObserver()
    words = list(vocab)
    observer.class_started(label, len(documents))

    bag: Counter[str] = Counter()
    for doc in documents:
        bag.update(doc.words())

    word_counts = {word: bag[word] for word in words}
    word_total = sum(count + 1 for count in word_counts.values())

    log_prior = log2_ratio(total_documents, len(documents), division)

    log_likelihood: dict[str, float] = {}
    for word in words:
        log_likelihood[word] = log2_ratio(word_counts[word] + 1, word_total, division)
        observer.word_processed(label, word)

    observer.class_finished(label)
    return ClassStatistics(
        label=label,
        document_count=len(documents),
        word_counts=word_counts,
        word_total=word_total,
        log_prior=log_prior,
        log_likelihood=log_likelihood,
    )


# ---------------------------------------------------------------------------
# Training
# ---------------------------------------------------------------------------

def partition_documents(
    documents: Sequence[Document],
    classes: Iterable[str],
) -> dict[str, list[Document]]:
    """Group documents by label, with an entry for every class.

    Raises:
        UnknownClassError: If a document label is not in ``classes``.
    """
    known = set(classes)
    groups: dict[str, list[Document]] = {label: [] for label in known}
    for doc in documents:
        if doc.label not in known:
            raise UnknownClassError(
                f"Document labeled {doc.label!r} is outside the class set "
                f"{sorted(known)}"
            )
        groups[doc.label].append(doc)
    return groups


def train(
    documents: Sequence[Document],
    classes: Iterable[str],
    vocab: Iterable[str],
    *,
    division: DivisionMode = DivisionMode.REAL,
    observer: TrainingObserver | None = None,
    workers: int = 1,
) -> Model:
    """Train a multinomial Naive Bayes model.

    Args:
        documents: Labeled training documents (non-empty).
        classes: Class set; must cover every document label and every class
            must have at least one document.
        vocab: Fixed feature vocabulary (non-empty). Words absent from the
            training documents get smoothed zero counts.
        division: ``REAL`` (default) or ``INTEGER`` division before the
            logarithm.
        observer: Optional progress observer.
        workers: Worker threads for the per-class pass. ``1`` runs
            sequentially.

    Returns:
        An immutable Model.

    Raises:
        EmptyDocumentsError: If ``documents`` is empty.
        EmptyVocabularyError: If ``vocab`` is empty.
        UnknownClassError: If a document label is outside ``classes``.
        DegenerateClassError: If a class has no training documents.
    """
    documents = list(documents)
    class_set = frozenset(classes)
    vocab_set = frozenset(vocab)
    division = DivisionMode(division)
    observer = observer or TrainingObserver()

    if not documents:
        raise EmptyDocumentsError("Cannot train on an empty document collection")
    if not vocab_set:
        raise EmptyVocabularyError("Cannot train with an empty vocabulary")

    groups = partition_documents(documents, class_set)
    empty = sorted(label for label, docs in groups.items() if not docs)
    if empty:
        raise DegenerateClassError(
            f"Classes without training documents have no defined prior: {empty}"
        )

    labels = sorted(class_set)
    words = sorted(vocab_set)
    total = len(documents)
    logger.debug(
        "Training %d documents, %d classes, %d words (division=%s, workers=%d)",
        total, len(labels), len(words), division.value, workers,
    )
    observer.training_started(labels, len(words))

    def run(label: str) -> ClassStatistics:
        return train_class(label, groups[label], total, words, division, observer)

    if workers > 1 and len(labels) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(run, labels))
    else:
        results = [run(label) for label in labels]

    # Fan-in, in sorted class order.
    log_prior: dict[str, float] = {}
    log_likelihood: dict[tuple[str, str], float] = {}
    for stats in results:
        log_prior[stats.label] = stats.log_prior
        for word, value in stats.log_likelihood.items():
            log_likelihood[(stats.label, word)] = value

    observer.training_finished()
    return Model(
        vocab=vocab_set,
        classes=class_set,
        log_prior=log_prior,
        log_likelihood=log_likelihood,
        division=division,
    )
