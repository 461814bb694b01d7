from __future__ import annotations

from datetime import datetime
from typing import Optional

from .errors import InvalidInputError

# formato único aceito na fronteira (yyyy-MM-dd HH:mm:ss)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_date(text: Optional[str]) -> Optional[datetime]:
    """
    None = sem limite (caso normal). String inválida = erro do chamador,
    nunca substituída por um default.
    """
    if text is None:
        return None
    try:
        dt = datetime.strptime(text, DATE_FORMAT)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Data inválida: {text!r} (esperado {DATE_FORMAT})") from e
    # strptime aceita campos sem zero à esquerda ("2024-5-1 1:2:3")
    if format_date(dt) != text:
        raise InvalidInputError(f"Data inválida: {text!r} (esperado {DATE_FORMAT})")
    return dt


def format_date(dt: datetime) -> str:
    return dt.strftime(DATE_FORMAT)
