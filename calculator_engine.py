"""
Motor de cálculo de la calculadora.

Este módulo provee la clase CalculatorEngine, una máquina de estados que
convierte pulsaciones (dígitos, operadores, funciones científicas, igual,
borrar) en el valor de pantalla, el rastro de la expresión y las
entradas de historial. No hay precedencia de operadores: cada operador
se aplica de inmediato sobre el acumulado, de izquierda a derecha.

Contrato de interfaz:
    - apply(command) -> CalculatorView
    - view() -> CalculatorView
    - state: EngineState (solo lectura por convención)

Los errores aritméticos nunca lanzan excepciones: se guardan como el
token de error y solo se traducen a texto visible al renderizar.
"""

import logging
import math
from dataclasses import dataclass, replace

from calculator_commands import (
    Backspace,
    Clear,
    DecimalPoint,
    Digit,
    Equals,
    LoadFromHistory,
    Negate,
    Operator,
    Percent,
    ScientificFn,
)
from display_formatter import (
    ERROR_TOKEN,
    MAX_DISPLAY_CHARS,
    DisplayFormatter,
    number_to_literal,
    to_number,
)
from history_store import HistoryEntry


logger = logging.getLogger(__name__)

RESULT_DECIMALS = 10
SCIENTIFIC_DECIMALS = 8


# ═════════════════════════════════════════════════════════════════
#  Aritmética
# ═════════════════════════════════════════════════════════════════

def _power(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except ValueError:
        # 0 elevado a negativo diverge; base negativa con exponente
        # fraccionario no tiene valor real.
        if a == 0 and b < 0:
            if b.is_integer() and int(b) % 2 == 1:
                return math.copysign(math.inf, a)
            return math.inf
        return math.nan
    except OverflowError:
        if a < 0 and b.is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf


def compute(a: float, b: float, op: str) -> float:
    """Aplica ``op`` a los operandos. Nunca lanza por errores de dominio."""
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if op == "/":
        return a / b if b != 0 else math.nan
    if op == "^":
        return _power(a, b)
    raise ValueError(f"Operador desconocido: {op!r}")


def _log_domain(fn, x: float) -> float:
    if x == 0:
        return -math.inf
    if x < 0 or math.isnan(x):
        return math.nan
    return fn(x)


def _safe_trig(fn, x: float) -> float:
    try:
        return fn(x)
    except ValueError:
        return math.nan


def _sqrt(x: float) -> float:
    if x < 0 or math.isnan(x):
        return math.nan
    return math.sqrt(x)


def _rounded(value: float, decimals: int) -> float:
    if not math.isfinite(value):
        return value
    return round(value, decimals)


# ═════════════════════════════════════════════════════════════════
#  Estado y vista
# ═════════════════════════════════════════════════════════════════

@dataclass
class EngineState:
    display: str = "0"
    accumulator: float | None = None
    pending_operator: str | None = None
    reset_on_next_digit: bool = False
    last_operand: float | None = None
    last_operator: str | None = None
    live_expression: str = ""
    finished_expression: str = ""


@dataclass(frozen=True)
class CalculatorView:
    display_text: str
    live_expression_text: str
    finished_expression_text: str

    @property
    def expression_text(self) -> str:
        """Rastro visible: el terminado tiene prioridad sobre el vivo."""
        return self.finished_expression_text or self.live_expression_text


# ═════════════════════════════════════════════════════════════════
#  Motor
# ═════════════════════════════════════════════════════════════════

class CalculatorEngine:
    """Máquina de estados de la calculadora."""

    _SCIENTIFIC = {
        "sqrt": (_sqrt, "√({})"),
        "square": (lambda x: x * x, "({})²"),
        "sin": (lambda x: _safe_trig(math.sin, x), "sin({})"),
        "cos": (lambda x: _safe_trig(math.cos, x), "cos({})"),
        "tan": (lambda x: _safe_trig(math.tan, x), "tan({})"),
        "log10": (lambda x: _log_domain(math.log10, x), "log({})"),
        "ln": (lambda x: _log_domain(math.log, x), "ln({})"),
        "pi": (lambda _x: math.pi, "π"),
        "e": (lambda _x: math.e, "e"),
    }

    def __init__(self, history_sink=None, formatter: DisplayFormatter | None = None,
                 max_chars: int = MAX_DISPLAY_CHARS):
        self._sink = history_sink
        self._formatter = formatter if formatter is not None else DisplayFormatter()
        self._max_chars = max_chars
        self._state = EngineState()
        self._handlers = {
            Digit: lambda c: self._enter(c.value),
            DecimalPoint: lambda _c: self._enter("."),
            Backspace: lambda _c: self._backspace(),
            Negate: lambda _c: self._transform_display(lambda v: v * -1),
            Percent: lambda _c: self._transform_display(lambda v: v / 100),
            Operator: lambda c: self._operator(c.symbol),
            Equals: lambda _c: self._equals(),
            ScientificFn: lambda c: self._scientific(c.kind),
            Clear: lambda _c: self._clear(),
            LoadFromHistory: lambda c: self._load(c.entry),
        }

    # ── Propiedades ──────────────────────────────────────────────

    @property
    def state(self) -> EngineState:
        """Copia del estado actual; modificarla no afecta al motor."""
        return replace(self._state)

    @property
    def history_sink(self):
        return self._sink

    @property
    def formatter(self) -> DisplayFormatter:
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: DisplayFormatter):
        self._formatter = formatter

    # ── Entrada principal ────────────────────────────────────────

    def apply(self, command) -> CalculatorView:
        """Aplica un comando y devuelve la vista resultante.

        Raises:
            TypeError: tipo de comando desconocido.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Comando no soportado: {command!r}")
        handler(command)
        logger.debug("%r -> %r", command, self._state)
        return self.view()

    def apply_all(self, commands) -> CalculatorView:
        view = self.view()
        for command in commands:
            view = self.apply(command)
        return view

    def view(self) -> CalculatorView:
        s = self._state
        return CalculatorView(
            display_text=self._formatter.render(s.display),
            live_expression_text=s.live_expression,
            finished_expression_text=s.finished_expression,
        )

    # ── Entrada de dígitos ───────────────────────────────────────

    def _enter(self, char: str):
        s = self._state
        if len(s.display) >= self._max_chars and not s.reset_on_next_digit:
            return

        if s.display == "0" or s.reset_on_next_digit:
            s.display = "0." if char == "." else char
            s.reset_on_next_digit = False
            if s.finished_expression:
                # Nuevo cálculo tras un resultado
                s.finished_expression = ""
                s.live_expression = ""
                s.accumulator = None
                s.pending_operator = None
            return

        if char == "." and "." in s.display:
            return
        s.display += char

    def _backspace(self):
        s = self._state
        if s.reset_on_next_digit:
            return
        display = s.display
        if display == ERROR_TOKEN or len(display) == 1 or (
            len(display) == 2 and display.startswith("-")
        ):
            s.display = "0"
            return
        # Sin exponentes a medias (p. ej. "1e-")
        trimmed = display[:-1].rstrip("e+-") if "e" in display else display[:-1]
        s.display = trimmed if trimmed not in ("", "-") else "0"

    def _transform_display(self, fn):
        s = self._state
        s.display = self._store(fn(to_number(s.display)))

    # ── Operadores ───────────────────────────────────────────────

    def _operator(self, op: str):
        s = self._state
        current = to_number(s.display)

        if s.finished_expression:
            s.finished_expression = ""
            s.live_expression = f"{s.display} {op} "
            s.accumulator = current
        elif s.accumulator is None:
            s.accumulator = current
            s.live_expression = f"{number_to_literal(current)} {op} "
        elif s.pending_operator is not None and not s.reset_on_next_digit:
            result = compute(s.accumulator, current, s.pending_operator)
            s.accumulator = result
            s.display = self._store(result)
            s.live_expression += f"{number_to_literal(current)} {op} "
        elif s.pending_operator is not None:
            # Operador repetido: gana el último
            s.live_expression = f"{s.live_expression[:-3]} {op} "

        s.pending_operator = op
        s.reset_on_next_digit = True
        s.last_operand = None
        s.last_operator = None

    def _equals(self):
        s = self._state
        current = to_number(s.display)

        if (s.pending_operator is None and s.last_operator is not None
                and s.last_operand is not None):
            result = _rounded(
                compute(current, s.last_operand, s.last_operator),
                RESULT_DECIMALS,
            )
            expression = (
                f"{number_to_literal(current)} {s.last_operator} "
                f"{number_to_literal(s.last_operand)}"
            )
            s.display = self._store(result)
            s.finished_expression = f"{expression} ="
            s.reset_on_next_digit = True
            self._emit(expression, s.display)
            return

        if s.accumulator is None or s.pending_operator is None:
            return

        result = _rounded(
            compute(s.accumulator, current, s.pending_operator),
            RESULT_DECIMALS,
        )
        expression = f"{s.live_expression}{number_to_literal(current)}"
        s.display = self._store(result)
        s.finished_expression = f"{expression} ="
        s.last_operand = current
        s.last_operator = s.pending_operator
        s.accumulator = None
        s.pending_operator = None
        s.live_expression = ""
        s.reset_on_next_digit = True
        self._emit(expression, s.display)

    # ── Funciones científicas ────────────────────────────────────

    def _scientific(self, kind: str):
        s = self._state
        fn, label_template = self._SCIENTIFIC[kind]
        value = to_number(s.display)
        label = label_template.format(number_to_literal(value))
        result = _rounded(fn(value), SCIENTIFIC_DECIMALS)

        s.display = self._store(result)
        s.finished_expression = f"{label} ="
        s.reset_on_next_digit = True
        s.accumulator = None
        s.pending_operator = None
        s.live_expression = ""
        # Una función científica cierra la cadena: no hay "=" repetible
        s.last_operand = None
        s.last_operator = None
        self._emit(label, s.display)

    # ── Borrado e historial ──────────────────────────────────────

    def _clear(self):
        self._state = EngineState()

    def _load(self, entry: HistoryEntry):
        self._state = EngineState(
            display=entry.result,
            reset_on_next_digit=True,
            finished_expression=f"{entry.expression} =",
        )

    # ── Auxiliares ───────────────────────────────────────────────

    @staticmethod
    def _store(value: float) -> str:
        literal = number_to_literal(value)
        if literal == ERROR_TOKEN:
            logger.info("Resultado no finito (%r), se muestra error", value)
        return literal

    def _emit(self, expression: str, result: str):
        entry = HistoryEntry(expression=expression, result=result)
        logger.debug("Cálculo completado: %s = %s", expression, result)
        if self._sink is not None:
            self._sink.append(entry)
