"""Training progress observers.

The trainer reports progress through a :class:`TrainingObserver`. The base
class does nothing, so training stays silent unless an observer is injected.
Observers only watch; they never influence the computed model.

Events may arrive from several worker threads when training runs in parallel.
"""

from __future__ import annotations

import logging


class TrainingObserver:
    """No-op observer. Subclass and override the events of interest."""

    def training_started(self, classes: list[str], vocab_size: int) -> None:
        pass

    def class_started(self, label: str, document_count: int) -> None:
        pass

    def word_processed(self, label: str, word: str) -> None:
        pass

    def class_finished(self, label: str) -> None:
        pass

    def training_finished(self) -> None:
        pass


class LoggingObserver(TrainingObserver):
    """Forward progress events to a :mod:`logging` logger.

    Per-word events are emitted at ``DEBUG``; class boundaries at ``INFO``.

    Args:
        logger: Target logger (defaults to ``vocab_bayes.trainer``).
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("vocab_bayes.trainer")

    def training_started(self, classes: list[str], vocab_size: int) -> None:
        self.logger.info(
            "Training %d classes over %d vocabulary words", len(classes), vocab_size
        )

    def class_started(self, label: str, document_count: int) -> None:
        self.logger.info("Starting class %s (%d documents)", label, document_count)

    def word_processed(self, label: str, word: str) -> None:
        self.logger.debug("Class %s: processed word %s", label, word)

    def class_finished(self, label: str) -> None:
        self.logger.info("Finished class %s", label)

    def training_finished(self) -> None:
        self.logger.info("Training finished")


class RecordingObserver(TrainingObserver):
    """Collect events as ``(event, *args)`` tuples."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def training_started(self, classes: list[str], vocab_size: int) -> None:
        self.events.append(("training_started", tuple(classes), vocab_size))

    def class_started(self, label: str, document_count: int) -> None:
        self.events.append(("class_started", label, document_count))

    def word_processed(self, label: str, word: str) -> None:
        self.events.append(("word_processed", label, word))

    def class_finished(self, label: str) -> None:
        self.events.append(("class_finished", label))

    def training_finished(self) -> None:
        self.events.append(("training_finished",))

    def of_kind(self, kind: str) -> list[tuple]:
        return [e for e in self.events if e[0] == kind]
