from __future__ import annotations

from collections import Counter
from typing import Callable, Iterable

from .models import ActivitySummary, Measurement


def aggregate(
    measurements: Iterable[Measurement],
    key_fn: Callable[[Measurement], str],
) -> ActivitySummary:
    """
    Contagem por sub-entidade (gateway ou sensor), mais/menos ativos e
    participação percentual na carga total.

    Empates nunca são desfeitos: todos os empatados entram no conjunto.
    """
    counts = Counter(key_fn(m) for m in measurements)
    total = sum(counts.values())
    if total == 0:
        return ActivitySummary()

    hi = max(counts.values())
    lo = min(counts.values())

    return ActivitySummary(
        counts=dict(counts),
        most_active=frozenset(k for k, c in counts.items() if c == hi),
        least_active=frozenset(k for k, c in counts.items() if c == lo),
        load_ratio={k: (c / total) * 100.0 for k, c in counts.items()},
    )
