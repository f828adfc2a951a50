"""Shared test fixtures for vocab-bayes tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from vocab_bayes.models import Document


@pytest.fixture
def good_bad_docs() -> list[Document]:
    """Two one-document classes with disjoint vocabulary."""
    return [
        Document(label="pos", text="good good"),
        Document(label="neg", text="bad bad"),
    ]


@pytest.fixture
def good_bad_vocab() -> frozenset[str]:
    return frozenset({"good", "bad"})


@pytest.fixture
def review_docs() -> list[Document]:
    """A small movie-review corpus with uneven class sizes."""
    return [
        Document(label="pos", text="a great film with a great cast"),
        Document(label="pos", text="wonderful acting and a great story"),
        Document(label="pos", text="loved it wonderful film"),
        Document(label="neg", text="a boring film with a terrible plot"),
        Document(label="neg", text="terrible acting boring story"),
        Document(label="neutral", text="the film was released in may"),
    ]


@pytest.fixture
def review_vocab() -> frozenset[str]:
    return frozenset({
        "great", "wonderful", "loved", "boring", "terrible", "film",
        "acting", "story", "plot", "cast", "released", "masterpiece",
    })


def _write_docs(root: Path, split: str, docs: dict[str, list[str]]) -> None:
    for label, texts in docs.items():
        folder = root / split / label
        folder.mkdir(parents=True)
        for i, text in enumerate(texts):
            (folder / f"{i}_review.txt").write_text(text, encoding="utf-8")


@pytest.fixture
def dataset_dir(tmp_path: Path) -> Path:
    """An IMDB-style dataset folder with train/ and test/ splits."""
    root = tmp_path / "dataset"
    root.mkdir()
    (root / "imdb.vocab").write_text(
        "great\nwonderful\nloved\nboring\nterrible\nawful\nfilm\n", encoding="utf-8"
    )
    _write_docs(root, "train", {
        "pos": [
            "a great film",
            "wonderful and great",
            "loved this wonderful film",
        ],
        "neg": [
            "a boring film",
            "terrible and boring",
            "awful terrible film",
        ],
    })
    _write_docs(root, "test", {
        "pos": ["great wonderful", "loved it"],
        "neg": ["boring awful", "terrible"],
    })
    return root
