"""
Batch sizes for local_batch calls.

A batch splits the targeted minions into waves that run one after the
other, either a fixed number of minions or a percentage at a time.
"""

from dataclasses import dataclass

from netapi.core.exceptions import ValidationError


@dataclass(frozen=True)
class Batch:
    """
    Wave size for batched execution.

    Usage:
        Batch.of(10)        # "10": ten minions per wave
        Batch.percent(25)   # "25%": a quarter of the minions per wave
    """

    size: int
    is_percent: bool = False

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ValidationError(f"Batch size must be an integer, got {self.size!r}")
        if self.size < 1:
            raise ValidationError(f"Batch size must be at least 1, got {self.size}")
        if self.is_percent and self.size > 100:
            raise ValidationError(f"Batch percentage must be at most 100, got {self.size}")

    @classmethod
    def of(cls, count: int) -> "Batch":
        return cls(count)

    @classmethod
    def percent(cls, percentage: int) -> "Batch":
        return cls(percentage, is_percent=True)

    @classmethod
    def parse(cls, value: str) -> "Batch":
        """Parse "10" or "25%"."""
        text = value.strip()
        is_percent = text.endswith("%")
        number = text[:-1] if is_percent else text
        try:
            size = int(number)
        except ValueError:
            raise ValidationError(f"Invalid batch size: {value!r}") from None
        return cls(size, is_percent=is_percent)

    def __str__(self) -> str:
        return f"{self.size}%" if self.is_percent else str(self.size)
