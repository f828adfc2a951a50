"""Training configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .models import DivisionMode


@dataclass
class TrainingConfig:
    """Settings shared by the trainer, the facade and the CLI.

    Args:
        division: ``REAL`` for true division (default) or ``INTEGER`` to
            floor ratios before the logarithm.
        workers: Number of worker threads for the per-class pass. ``1``
            trains sequentially.
    """

    division: DivisionMode = DivisionMode.REAL
    workers: int = 1

    def __post_init__(self) -> None:
        try:
            self.division = DivisionMode(self.division)
        except ValueError:
            known = ", ".join(m.value for m in DivisionMode)
            raise ValueError(
                f"Unknown division mode: {self.division!r}. Known: {known}"
            ) from None
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    def to_dict(self) -> dict:
        return {"division": self.division.value, "workers": self.workers}

    @classmethod
    def from_dict(cls, data: dict) -> "TrainingConfig":
        return cls(
            division=data.get("division", DivisionMode.REAL),
            workers=int(data.get("workers", 1)),
        )
