"""Data models for vocabulary-bound Naive Bayes classification."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class DivisionMode(str, Enum):
    """How ratios are divided before taking their logarithm."""

    REAL = "real"
    INTEGER = "integer"


@dataclass(frozen=True)
class Document:
    """A single text document with its class label.

    The label is only read during training; inference ignores it.
    """

    label: str
    text: str

    def words(self) -> list[str]:
        """Whitespace tokens of the text, in order."""
        return self.text.split()

    def to_dict(self) -> dict:
        return {"label": self.label, "text": self.text}


@dataclass(frozen=True)
class Model:
    """A trained multinomial Naive Bayes model.

    Dense over ``classes x vocab``: every (class, vocabulary word) pair has
    exactly one log-likelihood entry. Both maps are exposed read-only.

    Attributes:
        vocab: The fixed feature vocabulary.
        classes: The class labels the model scores.
        log_prior: ``log2(N / N_c)`` per class.
        log_likelihood: Smoothed log-likelihood per ``(class, word)`` pair.
        division: Division mode the model was trained with.
    """

    vocab: frozenset[str]
    classes: frozenset[str]
    log_prior: Mapping[str, float] = field(repr=False)
    log_likelihood: Mapping[tuple[str, str], float] = field(repr=False)
    division: DivisionMode = DivisionMode.REAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "vocab", frozenset(self.vocab))
        object.__setattr__(self, "classes", frozenset(self.classes))

        if set(self.log_prior) != self.classes:
            raise ValueError(
                f"Log priors {sorted(self.log_prior)} do not match classes "
                f"{sorted(self.classes)}"
            )

        expected = len(self.classes) * len(self.vocab)
        if len(self.log_likelihood) != expected:
            raise ValueError(
                f"Model must hold {expected} likelihoods "
                f"({len(self.classes)} classes x {len(self.vocab)} words), "
                f"got {len(self.log_likelihood)}"
            )
        for label, word in self.log_likelihood:
            if label not in self.classes or word not in self.vocab:
                raise ValueError(f"Unexpected likelihood entry: ({label!r}, {word!r})")

        object.__setattr__(self, "log_prior", MappingProxyType(dict(self.log_prior)))
        object.__setattr__(
            self, "log_likelihood", MappingProxyType(dict(self.log_likelihood))
        )

    def prior(self, label: str) -> float:
        return self.log_prior[label]

    def likelihood(self, label: str, word: str) -> float:
        return self.log_likelihood[(label, word)]

    @property
    def size(self) -> int:
        """Number of stored likelihoods."""
        return len(self.log_likelihood)

    def to_dict(self) -> dict:
        return {
            "classes": sorted(self.classes),
            "vocab_size": len(self.vocab),
            "division": self.division.value,
            "log_prior": {label: self.log_prior[label] for label in sorted(self.classes)},
        }
