"""
Formato de números para la pantalla de la calculadora.

Contrato de interfaz:
    - number_to_literal(value: float) -> str
    - DisplayFormatter.render(value: float | str) -> str
    - parse_rendered(text: str) -> float
"""

import math
import re
from decimal import Decimal


MAX_DISPLAY_CHARS = 12
ERROR_TOKEN = "Error"


def number_to_literal(value: float) -> str:
    """Devuelve la forma canónica del número, sin ``.0`` ni ceros de relleno.

    Los valores no finitos se convierten en ``ERROR_TOKEN``; la pantalla
    nunca guarda ``nan`` ni ``inf`` crudos.
    """
    value = float(value)
    if not math.isfinite(value):
        return ERROR_TOKEN
    if value == 0:
        return "0"

    magnitude = abs(value)
    if 1e-6 <= magnitude < 1e21:
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")

    mantissa, exponent = repr(value).split("e")
    if mantissa.endswith(".0"):
        mantissa = mantissa[:-2]
    return f"{mantissa}e{int(exponent):+d}"


def to_number(text: str) -> float:
    """Convierte el texto de la pantalla a número; lo inválido es NaN."""
    if text == ERROR_TOKEN:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def parse_rendered(text: str) -> float:
    """Inverso aproximado de ``render``: quita separadores de miles."""
    return to_number(text.replace(",", ""))


class DisplayFormatter:
    """Convierte valores en el texto que se muestra en pantalla."""

    _GROUPING_RE = re.compile(r"\B(?=(\d{3})+(?!\d))")
    _TRAILING_ZEROS_RE = re.compile(r"\.?0+e")

    def __init__(self, error_text: str = ERROR_TOKEN,
                 max_chars: int = MAX_DISPLAY_CHARS):
        self.error_text = error_text
        self.max_chars = max_chars

    def render(self, value) -> str:
        if isinstance(value, str):
            literal = value
        else:
            literal = number_to_literal(value)

        if literal == ERROR_TOKEN:
            return self.error_text

        number = to_number(literal)
        if not math.isfinite(number) and literal.lower().lstrip("+-") in (
            "nan", "inf", "infinity",
        ):
            return self.error_text

        if len(literal) > self.max_chars:
            if math.isnan(number):
                return literal[: self.max_chars]
            return self._exponential(number)

        # Separadores de miles solo en la parte entera
        parts = literal.split(".")
        parts[0] = self._GROUPING_RE.sub(",", parts[0])
        return ".".join(parts)

    def _exponential(self, number: float) -> str:
        mantissa, exponent = f"{number:.6e}".split("e")
        text = f"{mantissa}e{int(exponent):+d}"
        return self._TRAILING_ZEROS_RE.sub("e", text, count=1)


_default_formatter = DisplayFormatter()


def render(value) -> str:
    """Atajo con el formateador por defecto (token de error en inglés)."""
    return _default_formatter.render(value)
