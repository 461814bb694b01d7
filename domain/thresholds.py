from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# tolerância absoluta para EQUAL / NOT_EQUAL (comparação float)
EPSILON = 1e-9


class ComparisonType(str, Enum):
    LESS_THAN = "LESS_THAN"
    GREATER_THAN = "GREATER_THAN"
    LESS_OR_EQUAL = "LESS_OR_EQUAL"
    GREATER_OR_EQUAL = "GREATER_OR_EQUAL"
    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @classmethod
    def parse(cls, text: str) -> "ComparisonType":
        """Aceita o nome ("GREATER_THAN") ou o operador (">") usado no YAML."""
        t = str(text).strip()
        for ct, sym in _SYMBOLS.items():
            if t == sym:
                return ct
        try:
            return cls[t.upper()]
        except KeyError:
            raise ValueError(f"Tipo de comparação desconhecido: {text!r}") from None


_SYMBOLS = {
    ComparisonType.LESS_THAN: "<",
    ComparisonType.GREATER_THAN: ">",
    ComparisonType.LESS_OR_EQUAL: "<=",
    ComparisonType.GREATER_OR_EQUAL: ">=",
    ComparisonType.EQUAL: "==",
    ComparisonType.NOT_EQUAL: "!=",
}


def evaluate_threshold(x: float, threshold: "Threshold", epsilon: float = EPSILON) -> bool:
    """
    True = violação. Função pura; quem chama decide o que fazer (ex.: notificar).
    """
    op = threshold.comparison
    t = threshold.value
    if op is ComparisonType.LESS_THAN:
        return x < t
    if op is ComparisonType.GREATER_THAN:
        return x > t
    if op is ComparisonType.LESS_OR_EQUAL:
        return x <= t
    if op is ComparisonType.GREATER_OR_EQUAL:
        return x >= t
    if op is ComparisonType.EQUAL:
        return abs(x - t) < epsilon
    if op is ComparisonType.NOT_EQUAL:
        return abs(x - t) >= epsilon
    raise ValueError(f"Tipo de comparação não suportado: {op!r}")


@dataclass(frozen=True)
class Threshold:
    value: float
    comparison: ComparisonType

    def violated(self, x: float, epsilon: float = EPSILON) -> bool:
        return evaluate_threshold(x, self, epsilon)

    def label(self) -> str:
        return f"{self.comparison.symbol} {self.value}"
