"""Comandos de entrada que acepta el motor de la calculadora."""

from dataclasses import dataclass


OPERATORS = ("+", "-", "*", "/", "^")
SCIENTIFIC_FUNCTIONS = (
    "sqrt", "square", "sin", "cos", "tan", "log10", "ln", "pi", "e",
)


@dataclass(frozen=True)
class Digit:
    value: str

    def __post_init__(self):
        if not (len(self.value) == 1 and self.value in "0123456789"):
            raise ValueError(f"Dígito inválido: {self.value!r}")


@dataclass(frozen=True)
class DecimalPoint:
    pass


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Negate:
    pass


@dataclass(frozen=True)
class Percent:
    pass


@dataclass(frozen=True)
class Operator:
    symbol: str

    def __post_init__(self):
        if self.symbol not in OPERATORS:
            raise ValueError(f"Operador desconocido: {self.symbol!r}")


@dataclass(frozen=True)
class Equals:
    pass


@dataclass(frozen=True)
class ScientificFn:
    kind: str

    def __post_init__(self):
        if self.kind not in SCIENTIFIC_FUNCTIONS:
            raise ValueError(f"Función desconocida: {self.kind!r}")


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class LoadFromHistory:
    entry: object  # HistoryEntry


# ── Adaptador de teclado ─────────────────────────────────────────
#  Traduce nombres de tecla (tkinter keysym o carácter) a comandos.

_KEY_COMMANDS = {
    ".": DecimalPoint(),
    "period": DecimalPoint(),
    "KP_Decimal": DecimalPoint(),
    "=": Equals(),
    "Return": Equals(),
    "KP_Enter": Equals(),
    "Enter": Equals(),
    "BackSpace": Backspace(),
    "Backspace": Backspace(),
    "Escape": Clear(),
    "%": Percent(),
    "+": Operator("+"),
    "plus": Operator("+"),
    "KP_Add": Operator("+"),
    "-": Operator("-"),
    "minus": Operator("-"),
    "KP_Subtract": Operator("-"),
    "*": Operator("*"),
    "asterisk": Operator("*"),
    "KP_Multiply": Operator("*"),
    "/": Operator("/"),
    "slash": Operator("/"),
    "KP_Divide": Operator("/"),
    "^": Operator("^"),
    "asciicircum": Operator("^"),
}


def command_for_key(key: str):
    """Devuelve el comando asociado a la tecla o ``None`` si no aplica."""
    if len(key) == 1 and key in "0123456789":
        return Digit(key)
    if key.startswith("KP_") and key[3:].isdigit() and len(key) == 4:
        return Digit(key[3:])
    return _KEY_COMMANDS.get(key)
