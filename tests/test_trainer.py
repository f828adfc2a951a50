"""Tests for model training.

Covers priors, smoothed likelihoods, the density invariant, input
validation, integer division mode, parallel training and progress events.
"""

from __future__ import annotations

import logging
import math

import pytest

from vocab_bayes.models import DivisionMode, Document, Model
from vocab_bayes.observers import LoggingObserver, RecordingObserver
from vocab_bayes.trainer import (
    DegenerateClassError,
    EmptyDocumentsError,
    EmptyVocabularyError,
    TrainingError,
    UnknownClassError,
    log2_ratio,
    partition_documents,
    train,
    train_class,
)


# ---------------------------------------------------------------------------
# log2_ratio
# ---------------------------------------------------------------------------


class TestLog2Ratio:
    def test_real_division(self) -> None:
        assert log2_ratio(3, 4, DivisionMode.REAL) == math.log2(0.75)

    def test_integer_division_floors(self) -> None:
        assert log2_ratio(7, 2, DivisionMode.INTEGER) == math.log2(3)

    def test_integer_zero_quotient_is_negative_infinity(self) -> None:
        assert log2_ratio(1, 4, DivisionMode.INTEGER) == -math.inf

    def test_zero_denominator_raises(self) -> None:
        with pytest.raises(ZeroDivisionError):
            log2_ratio(1, 0, DivisionMode.REAL)


# ---------------------------------------------------------------------------
# Per-class statistics
# ---------------------------------------------------------------------------


class TestTrainClass:
    def test_counts_and_total(self, good_bad_docs: list[Document]) -> None:
        stats = train_class("pos", [good_bad_docs[0]], 2, ["bad", "good"])
        assert stats.document_count == 1
        assert stats.word_counts == {"good": 2, "bad": 0}
        assert stats.word_total == 4

    def test_prior_and_likelihoods(self, good_bad_docs: list[Document]) -> None:
        stats = train_class("pos", [good_bad_docs[0]], 2, ["bad", "good"])
        assert stats.log_prior == 1.0
        assert stats.log_likelihood["good"] == math.log2(3 / 4)
        assert stats.log_likelihood["bad"] == -2.0

    def test_repeated_words_across_documents(self) -> None:
        docs = [Document("c", "a b a"), Document("c", "a c")]
        stats = train_class("c", docs, 4, ["a", "b", "z"])
        assert stats.word_counts == {"a": 3, "b": 1, "z": 0}
        # (3+1) + (1+1) + (0+1); "c" is not in the vocabulary
        assert stats.word_total == 7


# ---------------------------------------------------------------------------
# train()
# ---------------------------------------------------------------------------


class TestTrain:
    def test_end_to_end_model(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        model = train(good_bad_docs, {"pos", "neg"}, good_bad_vocab)
        assert isinstance(model, Model)
        assert model.log_prior == {"pos": 1.0, "neg": 1.0}
        assert model.likelihood("pos", "good") == math.log2(3 / 4)
        assert model.likelihood("pos", "bad") == math.log2(1 / 4)
        assert model.likelihood("neg", "bad") == math.log2(3 / 4)
        assert model.likelihood("neg", "good") == -2.0

    def test_priors_follow_document_counts(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        model = train(review_docs, {"pos", "neg", "neutral"}, review_vocab)
        assert model.prior("pos") == pytest.approx(math.log2(6 / 3))
        assert model.prior("neg") == pytest.approx(math.log2(6 / 2))
        assert model.prior("neutral") == pytest.approx(math.log2(6))

    def test_partition_is_exhaustive(
        self, review_docs: list[Document]
    ) -> None:
        groups = partition_documents(review_docs, {"pos", "neg", "neutral"})
        assert sum(len(docs) for docs in groups.values()) == len(review_docs)
        assert {label: len(docs) for label, docs in groups.items()} == {
            "pos": 3, "neg": 2, "neutral": 1,
        }

    def test_density_invariant(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        classes = {"pos", "neg", "neutral"}
        model = train(review_docs, classes, review_vocab)
        assert model.size == len(classes) * len(review_vocab)
        for label in classes:
            for word in review_vocab:
                assert (label, word) in model.log_likelihood

    def test_likelihoods_are_finite_with_real_division(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        model = train(review_docs, {"pos", "neg", "neutral"}, review_vocab)
        assert all(math.isfinite(v) for v in model.log_likelihood.values())
        assert all(v < 0 for v in model.log_likelihood.values())

    def test_likelihoods_sum_to_one_per_class(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        model = train(review_docs, {"pos", "neg", "neutral"}, review_vocab)
        for label in model.classes:
            total = sum(2 ** model.likelihood(label, w) for w in review_vocab)
            assert total == pytest.approx(1.0)

    def test_unseen_vocabulary_word_gets_smoothed_count(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        model = train(review_docs, {"pos", "neg", "neutral"}, review_vocab)
        # neither word occurs in a pos document
        assert model.likelihood("pos", "masterpiece") == model.likelihood("pos", "plot")

    def test_deterministic(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        a = train(review_docs, {"pos", "neg", "neutral"}, review_vocab)
        b = train(review_docs, {"pos", "neg", "neutral"}, review_vocab)
        assert dict(a.log_prior) == dict(b.log_prior)
        assert dict(a.log_likelihood) == dict(b.log_likelihood)

    def test_parallel_matches_sequential(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        classes = {"pos", "neg", "neutral"}
        seq = train(review_docs, classes, review_vocab, workers=1)
        par = train(review_docs, classes, review_vocab, workers=4)
        assert dict(seq.log_prior) == dict(par.log_prior)
        assert dict(seq.log_likelihood) == dict(par.log_likelihood)

    def test_accepts_generators(self, good_bad_docs: list[Document]) -> None:
        model = train(
            (d for d in good_bad_docs), (c for c in ["pos", "neg"]), iter(["good", "bad"])
        )
        assert model.classes == {"pos", "neg"}

    def test_division_accepts_string(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        model = train(good_bad_docs, {"pos", "neg"}, good_bad_vocab, division="integer")
        assert model.division is DivisionMode.INTEGER


class TestIntegerDivision:
    def test_truncated_likelihoods_collapse_to_negative_infinity(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        model = train(
            good_bad_docs, {"pos", "neg"}, good_bad_vocab, division=DivisionMode.INTEGER
        )
        assert all(v == -math.inf for v in model.log_likelihood.values())
        assert model.log_prior == {"pos": 1.0, "neg": 1.0}

    def test_truncated_prior(self, review_docs: list[Document], review_vocab) -> None:
        model = train(
            review_docs, {"pos", "neg", "neutral"}, review_vocab,
            division=DivisionMode.INTEGER,
        )
        assert model.prior("pos") == 1.0
        assert model.prior("neg") == math.log2(3)
        assert model.prior("neutral") == math.log2(6)

    def test_single_word_vocabulary_keeps_full_mass(self) -> None:
        docs = [Document("c", "a a")]
        model = train(docs, {"c"}, {"a"}, division=DivisionMode.INTEGER)
        assert model.likelihood("c", "a") == 0.0
        assert model.prior("c") == 0.0


class TestTrainValidation:
    def test_empty_documents(self, good_bad_vocab: frozenset[str]) -> None:
        with pytest.raises(EmptyDocumentsError):
            train([], {"pos"}, good_bad_vocab)

    def test_empty_vocabulary(self, good_bad_docs: list[Document]) -> None:
        with pytest.raises(EmptyVocabularyError, match="empty vocabulary"):
            train(good_bad_docs, {"pos", "neg"}, set())

    def test_class_without_documents(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        with pytest.raises(DegenerateClassError, match="neutral"):
            train(good_bad_docs, {"pos", "neg", "neutral"}, good_bad_vocab)

    def test_document_label_outside_class_set(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        with pytest.raises(UnknownClassError, match="'neg'"):
            train(good_bad_docs, {"pos"}, good_bad_vocab)

    def test_errors_are_value_errors(self, good_bad_vocab: frozenset[str]) -> None:
        with pytest.raises(ValueError):
            train([], {"pos"}, good_bad_vocab)
        assert issubclass(DegenerateClassError, TrainingError)

    def test_validation_happens_before_progress_events(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        observer = RecordingObserver()
        with pytest.raises(DegenerateClassError):
            train(
                good_bad_docs, {"pos", "neg", "neutral"}, good_bad_vocab,
                observer=observer,
            )
        assert observer.events == []


# ---------------------------------------------------------------------------
# Progress observers
# ---------------------------------------------------------------------------


class TestObservers:
    def test_event_sequence(
        self, good_bad_docs: list[Document], good_bad_vocab: frozenset[str]
    ) -> None:
        observer = RecordingObserver()
        train(good_bad_docs, {"pos", "neg"}, good_bad_vocab, observer=observer)
        assert observer.events[0] == ("training_started", ("neg", "pos"), 2)
        assert observer.events[-1] == ("training_finished",)
        assert observer.of_kind("class_started") == [
            ("class_started", "neg", 1),
            ("class_started", "pos", 1),
        ]
        assert observer.of_kind("word_processed") == [
            ("word_processed", "neg", "bad"),
            ("word_processed", "neg", "good"),
            ("word_processed", "pos", "bad"),
            ("word_processed", "pos", "good"),
        ]

    def test_observer_does_not_change_results(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        classes = {"pos", "neg", "neutral"}
        silent = train(review_docs, classes, review_vocab)
        watched = train(review_docs, classes, review_vocab, observer=RecordingObserver())
        assert dict(silent.log_likelihood) == dict(watched.log_likelihood)

    def test_parallel_events_cover_every_word(
        self, review_docs: list[Document], review_vocab: frozenset[str]
    ) -> None:
        observer = RecordingObserver()
        train(
            review_docs, {"pos", "neg", "neutral"}, review_vocab,
            observer=observer, workers=3,
        )
        assert len(observer.of_kind("word_processed")) == 3 * len(review_vocab)
        assert len(observer.of_kind("class_finished")) == 3

    def test_logging_observer(
        self,
        good_bad_docs: list[Document],
        good_bad_vocab: frozenset[str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="vocab_bayes.trainer"):
            train(good_bad_docs, {"pos", "neg"}, good_bad_vocab, observer=LoggingObserver())
        messages = [r.getMessage() for r in caplog.records]
        assert "Starting class pos (1 documents)" in messages
        assert "Class neg: processed word good" in messages
        assert "Training finished" in messages
