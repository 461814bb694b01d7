from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class Range(Generic[T]):
    """
    Bucket de histograma.

    - Buckets comuns são [start, end)
    - O último bucket de um conjunto é [start, end], para que o máximo
      observado caia em exatamente um bucket
    """
    start: T
    end: T
    is_last_bucket: bool = False

    def __post_init__(self) -> None:
        if self.end < self.start:  # type: ignore[operator]
            raise ValueError(f"Range inválido: start={self.start} > end={self.end}")

    def contains(self, value: Any) -> bool:
        if value < self.start:
            return False
        if self.is_last_bucket:
            return value <= self.end
        return value < self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end}{']' if self.is_last_bucket else ')'}"
