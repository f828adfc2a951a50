"""Command-line interface for vocab-bayes.

Provides ``evaluate``, ``classify``, and ``inspect`` commands with rich
terminal output using the ``click`` and ``rich`` libraries. Every command
trains a fresh model from the dataset folder; models are not persisted.

Usage::

    vocab-bayes evaluate dataset/
    vocab-bayes classify dataset/ "a truly great film"
    vocab-bayes inspect dataset/ --label pos --top 15
"""

from __future__ import annotations

import json
import logging
import math
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from .classifier import NaiveBayes
from .config import TrainingConfig
from .dataset import DEFAULT_VOCAB_FILE, Dataset, read_dataset
from .evaluation import ClassificationMetrics, evaluate as evaluate_model
from .models import DivisionMode, Document
from .observers import TrainingObserver

console = Console()


class RichProgressObserver(TrainingObserver):
    """Drive a rich progress bar with one task per class."""

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self._tasks: dict[str, int] = {}
        self._vocab_size = 0

    def training_started(self, classes: list[str], vocab_size: int) -> None:
        self._vocab_size = vocab_size
        for label in classes:
            self._tasks[label] = self.progress.add_task(
                f"class {label}", total=vocab_size, start=False
            )

    def class_started(self, label: str, document_count: int) -> None:
        self.progress.start_task(self._tasks[label])

    def word_processed(self, label: str, word: str) -> None:
        self.progress.advance(self._tasks[label])

    def class_finished(self, label: str) -> None:
        self.progress.update(self._tasks[label], completed=self._vocab_size)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _json_score(value: float) -> float | str:
    """Spell out infinite scores, which strict JSON cannot encode."""
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"
    return value


def _load(path: Path, vocab_file: str) -> Dataset:
    with console.status("[bold blue]Reading dataset...", spinner="dots"):
        return read_dataset(path, vocab_file=vocab_file)


def _train(dataset: Dataset, config: TrainingConfig, show_progress: bool) -> NaiveBayes:
    if not show_progress:
        return NaiveBayes(config).train(dataset.train_docs, dataset.vocab, dataset.classes)

    with Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        nb = NaiveBayes(config, observer=RichProgressObserver(progress))
        return nb.train(dataset.train_docs, dataset.vocab, dataset.classes)


def dataset_options(func):
    """Options shared by every command that trains a model."""
    func = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")(func)
    func = click.option(
        "--workers", "-w", type=click.IntRange(min=1), default=1, show_default=True,
        envvar="VOCAB_BAYES_WORKERS", help="Worker threads for per-class training.",
    )(func)
    func = click.option(
        "--division", "-d", type=click.Choice([m.value for m in DivisionMode]),
        default=DivisionMode.REAL.value, show_default=True,
        envvar="VOCAB_BAYES_DIVISION", help="Division before the logarithm.",
    )(func)
    func = click.option(
        "--vocab-file", default=DEFAULT_VOCAB_FILE, show_default=True,
        help="Vocabulary file name inside the dataset folder.",
    )(func)
    func = click.argument(
        "dataset", type=click.Path(exists=True, file_okay=False, path_type=Path),
    )(func)
    return func


@click.group()
@click.version_option(package_name="vocab-bayes")
def main() -> None:
    """📊 vocab-bayes: multinomial Naive Bayes over a fixed vocabulary.

    Train on a folder dataset, then evaluate, classify text, or inspect
    the most informative words per class.
    """
    pass


@main.command()
@dataset_options
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def evaluate(
    dataset: Path, vocab_file: str, division: str, workers: int, verbose: bool, output: str,
) -> None:
    """Train on DATASET/train and evaluate on DATASET/test.

    Example: vocab-bayes evaluate dataset/
    """
    _configure_logging(verbose)
    try:
        config = TrainingConfig(division=division, workers=workers)
        data = _load(dataset, vocab_file)
        nb = _train(data, config, show_progress=output == "rich")
        if not data.test_docs:
            raise ValueError(f"No test documents found under {dataset / 'test'}")
        with console.status("[bold blue]Classifying test documents...", spinner="dots"):
            metrics = evaluate_model(nb.model, data.test_docs, workers=config.workers)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    if output == "json":
        click.echo(json.dumps(metrics.to_dict(), indent=2, allow_nan=False))
    else:
        _render_metrics(metrics, data)


@main.command()
@dataset_options
@click.argument("texts", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(
    dataset: Path, vocab_file: str, division: str, workers: int, verbose: bool,
    texts: tuple[str, ...], output: str,
) -> None:
    """Train on DATASET and classify each TEXT.

    Example: vocab-bayes classify dataset/ "a truly great film"
    """
    _configure_logging(verbose)
    try:
        config = TrainingConfig(division=division, workers=workers)
        data = _load(dataset, vocab_file)
        nb = _train(data, config, show_progress=output == "rich")
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    results = []
    for text in texts:
        doc = Document(label="", text=text)
        results.append({
            "text": text,
            "labels": sorted(nb.guess(doc)),
            "scores": nb.scores(doc),
        })

    if output == "json":
        for result in results:
            result["scores"] = {k: _json_score(v) for k, v in result["scores"].items()}
        click.echo(json.dumps(results, indent=2, allow_nan=False))
    else:
        _render_predictions(results)


@main.command()
@dataset_options
@click.option("--label", "-l", required=True, help="Class to inspect.")
@click.option("--top", "-n", "top_n", type=click.IntRange(min=1), default=20,
              show_default=True, help="Number of words to show.")
def inspect(
    dataset: Path, vocab_file: str, division: str, workers: int, verbose: bool,
    label: str, top_n: int,
) -> None:
    """Show the most informative words for a class.

    Example: vocab-bayes inspect dataset/ --label pos --top 15
    """
    _configure_logging(verbose)
    try:
        config = TrainingConfig(division=division, workers=workers)
        data = _load(dataset, vocab_file)
        nb = _train(data, config, show_progress=True)
        words = nb.most_informative_words(label, top_n)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    table = Table(title=f"Most informative words: {label}")
    table.add_column("#", justify="right", width=4)
    table.add_column("Word", style="cyan")
    table.add_column("Log ratio", justify="right")
    for i, (word, ratio) in enumerate(words, 1):
        table.add_row(str(i), word, f"{ratio:.4f}")
    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_metrics(metrics: ClassificationMetrics, data: Dataset) -> None:
    """Render evaluation metrics with rich formatting."""
    console.print()
    console.print(Panel(
        f"Classes: {len(data.classes)} | "
        f"Vocabulary: {len(data.vocab)} | "
        f"Train: {len(data.train_docs)} | "
        f"Test: {len(data.test_docs)}",
        title="📊 Evaluation",
        border_style="blue",
    ))

    table = Table(title="Per-class metrics")
    table.add_column("Class", style="cyan")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F1", justify="right")
    table.add_column("Support", justify="right")
    for cls in sorted(metrics.per_class):
        m = metrics.per_class[cls]
        table.add_row(
            cls,
            f"{m['precision']:.4f}",
            f"{m['recall']:.4f}",
            f"{m['f1']:.4f}",
            str(metrics.support.get(cls, 0)),
        )
    console.print(table)

    if metrics.accuracy > 0.8:
        style = "bold green"
    elif metrics.accuracy > 0.5:
        style = "bold yellow"
    else:
        style = "bold red"
    console.print(f"Accuracy: [{style}]{metrics.accuracy:.2%}[/]")
    console.print(f"Macro F1: {metrics.macro_f1:.4f} | Weighted F1: {metrics.weighted_f1:.4f}")
    if metrics.ambiguous:
        console.print(f"[yellow]Ambiguous predictions (ties):[/] {metrics.ambiguous}")
    console.print()


def _render_predictions(results: list[dict]) -> None:
    """Render predicted labels and scores as a rich table."""
    table = Table(title="Predictions", show_lines=True)
    table.add_column("Text (excerpt)", style="white", max_width=50)
    table.add_column("Labels", style="cyan")
    table.add_column("Scores", style="dim")

    for result in results:
        text = result["text"]
        excerpt = text[:80] + ("..." if len(text) > 80 else "")
        scores = "\n".join(f"{k}: {v:.4f}" for k, v in sorted(result["scores"].items()))
        table.add_row(excerpt, ", ".join(result["labels"]) or "-", scores)

    console.print(table)
    console.print()


if __name__ == "__main__":
    main()
