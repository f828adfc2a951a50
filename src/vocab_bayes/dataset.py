"""Dataset loading from a folder tree.

Expected layout::

    <root>/imdb.vocab              whitespace-separated vocabulary
    <root>/train/<class>/<file>    one document per file
    <root>/test/<class>/<file>

The folder name of each document is its class label.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .models import Document

logger = logging.getLogger(__name__)

DEFAULT_VOCAB_FILE = "imdb.vocab"


@dataclass
class Dataset:
    """Training and test documents with their vocabulary and class set."""

    vocab: frozenset[str]
    classes: frozenset[str]
    train_docs: list[Document] = field(default_factory=list)
    test_docs: list[Document] = field(default_factory=list)

    def summary(self) -> dict:
        return {
            "vocab_size": len(self.vocab),
            "classes": sorted(self.classes),
            "train_docs": len(self.train_docs),
            "test_docs": len(self.test_docs),
        }


def read_vocab(path: str | Path) -> frozenset[str]:
    """Read a whitespace-separated vocabulary file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Vocabulary file not found: {path}")
    return frozenset(path.read_text(encoding="utf-8").split())


def read_folder_documents(path: str | Path) -> list[Document]:
    """Read every ``<path>/<class>/<file>`` as a labeled document.

    Files directly under ``path`` are skipped. Folders and files are read in
    sorted order.
    """
    path = Path(path)
    documents: list[Document] = []
    for class_dir in sorted(p for p in path.iterdir() if p.is_dir()):
        logger.debug("Reading folder: %s", class_dir.name)
        for file in sorted(p for p in class_dir.iterdir() if p.is_file()):
            documents.append(Document(
                label=class_dir.name,
                text=file.read_text(encoding="utf-8", errors="replace"),
            ))
    return documents


def read_dataset(path: str | Path, vocab_file: str = DEFAULT_VOCAB_FILE) -> Dataset:
    """Load vocabulary, training and test documents from a dataset folder.

    Args:
        path: Dataset root folder.
        vocab_file: Vocabulary file name relative to ``path``.

    Returns:
        Dataset whose classes are the distinct training labels. A missing
        ``test`` folder yields no test documents.

    Raises:
        NotADirectoryError: If ``path`` is not a folder.
        FileNotFoundError: If the vocabulary file or ``train`` folder is missing.
    """
    root = Path(path)
    if not root.is_dir():
        raise NotADirectoryError(f"Dataset path must be a folder: {root}")

    vocab = read_vocab(root / vocab_file)

    train_path = root / "train"
    if not train_path.is_dir():
        raise FileNotFoundError(f"Training folder not found: {train_path}")
    train_docs = read_folder_documents(train_path)

    test_path = root / "test"
    test_docs = read_folder_documents(test_path) if test_path.is_dir() else []

    dataset = Dataset(
        vocab=vocab,
        classes=frozenset(doc.label for doc in train_docs),
        train_docs=train_docs,
        test_docs=test_docs,
    )
    logger.info("Loaded dataset %s: %s", root, dataset.summary())
    return dataset
