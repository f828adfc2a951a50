"""vocab-bayes -- multinomial Naive Bayes text classification over a fixed vocabulary."""

__version__ = "0.1.0"

from .classifier import (
    NaiveBayes,
    argmax_all,
    classify,
    classify_batch,
    most_informative_words,
    score,
)
from .config import TrainingConfig
from .dataset import Dataset, read_dataset, read_folder_documents, read_vocab
from .evaluation import (
    AMBIGUOUS,
    ClassificationMetrics,
    compute_metrics,
    evaluate,
    resolve_prediction,
)
from .models import DivisionMode, Document, Model
from .observers import LoggingObserver, RecordingObserver, TrainingObserver
from .trainer import (
    ClassStatistics,
    DegenerateClassError,
    EmptyDocumentsError,
    EmptyVocabularyError,
    TrainingError,
    UnknownClassError,
    train,
    train_class,
)

__all__ = [
    # Core
    "Document",
    "Model",
    "DivisionMode",
    "train",
    "train_class",
    "ClassStatistics",
    "classify",
    "classify_batch",
    "score",
    "argmax_all",
    "most_informative_words",
    "NaiveBayes",
    "TrainingConfig",
    # Errors
    "TrainingError",
    "EmptyDocumentsError",
    "EmptyVocabularyError",
    "UnknownClassError",
    "DegenerateClassError",
    # Observers
    "TrainingObserver",
    "LoggingObserver",
    "RecordingObserver",
    # Dataset
    "Dataset",
    "read_dataset",
    "read_folder_documents",
    "read_vocab",
    # Evaluation
    "AMBIGUOUS",
    "ClassificationMetrics",
    "compute_metrics",
    "evaluate",
    "resolve_prediction",
]
