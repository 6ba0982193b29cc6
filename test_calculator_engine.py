import math

import pytest

from calculator_commands import (
    Backspace,
    Clear,
    Digit,
    Equals,
    LoadFromHistory,
    Negate,
    Operator,
    ScientificFn,
    command_for_key,
)
from calculator_engine import CalculatorEngine, CalculatorView, EngineState, compute
from display_formatter import ERROR_TOKEN, DisplayFormatter
from history_store import HistoryEntry, HistoryStore


_LETTER_COMMANDS = {"C": Clear(), "N": Negate(), "<": Backspace()}


def press(engine, keys: str):
    """Aplica una secuencia compacta de teclas, p. ej. ``"12+4="``."""
    view = engine.view()
    for key in keys:
        command = _LETTER_COMMANDS.get(key) or command_for_key(key)
        view = engine.apply(command)
    return view


@pytest.fixture
def history():
    return HistoryStore()


@pytest.fixture
def engine(history):
    return CalculatorEngine(history_sink=history)


# --- Entrada de dígitos ---

def test_initial_view(engine):
    view = engine.view()
    assert view == CalculatorView("0", "", "")
    assert engine.state == EngineState()


def test_digits_append_and_replace_leading_zero(engine):
    assert press(engine, "0012").display_text == "12"


def test_decimal_on_zero_display(engine):
    assert press(engine, ".5").display_text == "0.5"


def test_second_decimal_point_is_ignored(engine):
    assert press(engine, "1..5.").display_text == "1.5"


def test_digit_cap_silently_ignores_extra_digits(engine):
    press(engine, "1" * 15)
    assert engine.state.display == "1" * 12


def test_negate_and_percent_in_place(engine):
    assert press(engine, "50%").display_text == "0.5"
    engine.apply(Clear())
    assert press(engine, "5N").display_text == "-5"


def test_negate_does_not_touch_pending_chain(engine):
    view = press(engine, "5+3N=")
    assert view.display_text == "2"


# --- Borrado ---

def test_backspace_on_zero_is_noop(engine):
    assert engine.apply(Backspace()).display_text == "0"


def test_backspace_on_negative_single_digit(engine):
    press(engine, "5N")
    assert engine.apply(Backspace()).display_text == "0"
    assert engine.apply(Backspace()).display_text == "0"


def test_backspace_removes_last_character(engine):
    assert press(engine, "123<").display_text == "12"


def test_backspace_after_result_is_noop(engine):
    assert press(engine, "5+3=<").display_text == "8"


# --- Cadenas de operadores ---

def test_left_to_right_without_precedence(engine, history):
    view = press(engine, "2+3*4=")
    assert view.display_text == "20"
    assert view.finished_expression_text == "2 + 3 * 4 ="
    assert history.latest().expression == "2 + 3 * 4"
    assert history.latest().result == "20"


def test_fold_updates_display_with_intermediate(engine):
    view = press(engine, "2+3*")
    assert view.display_text == "5"
    assert view.live_expression_text == "2 + 3 * "


def test_repeated_operator_last_one_wins(engine):
    view = press(engine, "5+-")
    assert view.live_expression_text == "5 - "
    assert press(engine, "3=").display_text == "2"


def test_equals_rounds_floating_point_noise(engine):
    assert press(engine, ".1+.2=").display_text == "0.3"


def test_equals_without_operator_is_noop(engine, history):
    view = press(engine, "7=")
    assert view.display_text == "7"
    assert view.finished_expression_text == ""
    assert len(history) == 0


def test_equals_right_after_operator_uses_display(engine):
    assert press(engine, "5+=").display_text == "10"


def test_operator_after_result_starts_new_chain(engine):
    view = press(engine, "5+3=*")
    assert view.finished_expression_text == ""
    assert view.live_expression_text == "8 * "
    assert press(engine, "2=").display_text == "16"


def test_power_operator(engine):
    assert press(engine, "2^10=").display_text == "1,024"


# --- "=" repetido ---

def test_repeat_equals(engine, history):
    press(engine, "5+3=")
    view = engine.apply(Equals())
    assert view.display_text == "11"
    assert view.finished_expression_text == "8 + 3 ="
    assert len(history) == 2
    assert history.latest().expression == "8 + 3"


def test_repeat_equals_against_newly_typed_value(engine):
    press(engine, "5+3=")
    view = press(engine, "2")
    assert view.finished_expression_text == ""
    assert press(engine, "=").display_text == "5"


# --- Errores ---

def test_division_by_zero_then_clear(engine, history):
    view = press(engine, "5/0=")
    assert view.display_text == "Error"
    assert engine.state.display == ERROR_TOKEN
    assert history.latest().result == ERROR_TOKEN
    assert engine.apply(Clear()).display_text == "0"
    assert engine.state == EngineState()


def test_error_propagates_through_fold(engine):
    assert press(engine, "6/0+").display_text == "Error"
    assert press(engine, "2=").display_text == "Error"


def test_localized_error_token():
    engine = CalculatorEngine(formatter=DisplayFormatter(error_text="Hata"))
    assert press(engine, "1/0=").display_text == "Hata"


def test_digit_after_error_starts_fresh(engine):
    press(engine, "1/0=")
    assert press(engine, "4").display_text == "4"


@pytest.mark.parametrize("a", [0.0, 1.0, -3.5, 1e300])
def test_compute_division_by_zero_is_nan(a):
    assert math.isnan(compute(a, 0.0, "/"))


def test_compute_power_domain():
    assert math.isnan(compute(-8.0, 1 / 3, "^"))
    assert compute(0.0, -1.0, "^") == math.inf
    assert compute(10.0, 400.0, "^") == math.inf
    assert compute(-10.0, 401.0, "^") == -math.inf


def test_compute_unknown_operator():
    with pytest.raises(ValueError):
        compute(1.0, 2.0, "%")


# --- Funciones científicas ---

def test_sqrt_label_and_result(engine, history):
    press(engine, "4")
    view = engine.apply(ScientificFn("sqrt"))
    assert view.display_text == "2"
    assert view.finished_expression_text == "√(4) ="
    assert history.latest().expression == "√(4)"


def test_sqrt_of_negative_records_error(engine, history):
    press(engine, "9N")
    view = engine.apply(ScientificFn("sqrt"))
    assert view.display_text == "Error"
    assert history.latest().expression == "√(-9)"
    assert history.latest().result == ERROR_TOKEN


def test_scientific_terminates_pending_chain(engine):
    press(engine, "5+3")
    view = engine.apply(ScientificFn("sqrt"))
    state = engine.state
    assert view.display_text == "1.73205081"
    assert state.accumulator is None
    assert state.pending_operator is None
    assert view.live_expression_text == ""


def test_scientific_clears_repeat_equals(engine, history):
    press(engine, "5+3=")
    engine.apply(ScientificFn("square"))
    assert engine.state.last_operator is None
    view = engine.apply(Equals())
    assert view.display_text == "64"
    assert len(history) == 2


@pytest.mark.parametrize("kind,keys,display,label", [
    ("square", "3", "9", "(3)²"),
    ("sin", "0", "0", "sin(0)"),
    ("cos", "0", "1", "cos(0)"),
    ("ln", "1", "0", "ln(1)"),
    ("log10", "100", "2", "log(100)"),
    ("pi", "7", "3.14159265", "π"),
    ("e", "7", "2.71828183", "e"),
])
def test_scientific_functions(engine, kind, keys, display, label):
    press(engine, keys)
    view = engine.apply(ScientificFn(kind))
    assert view.display_text == display
    assert view.finished_expression_text == f"{label} ="


def test_log_of_zero_is_error(engine):
    press(engine, "0")
    assert engine.apply(ScientificFn("log10")).display_text == "Error"


# --- Historial ---

def test_load_from_history_then_digit(engine):
    entry = HistoryEntry(expression="12 + 4", result="16")
    view = engine.apply(LoadFromHistory(entry))
    assert view.display_text == "16"
    assert view.finished_expression_text == "12 + 4 ="
    assert engine.state.pending_operator is None

    view = press(engine, "7")
    assert view.display_text == "7"
    assert view.finished_expression_text == ""
    assert engine.state.accumulator is None
    assert press(engine, "+1=").display_text == "8"


def test_load_from_history_then_operator_uses_result(engine):
    engine.apply(LoadFromHistory(HistoryEntry(expression="12 + 4", result="16")))
    assert press(engine, "+4=").display_text == "20"


def test_plain_list_works_as_history_sink():
    sink = []
    engine = CalculatorEngine(history_sink=sink)
    press(engine, "1+1==")
    assert [e.result for e in sink] == ["2", "3"]
    assert len({e.id for e in sink}) == 2


# --- Vista y despacho ---

def test_expression_text_prefers_finished(engine):
    view = press(engine, "1+2=")
    assert view.expression_text == "1 + 2 ="
    view = press(engine, "+")
    assert view.expression_text == "3 + "


def test_state_is_a_copy(engine):
    state = engine.state
    state.display = "999"
    assert engine.view().display_text == "0"


def test_unknown_command_raises(engine):
    with pytest.raises(TypeError):
        engine.apply("7")


def test_apply_all(engine):
    view = engine.apply_all([Digit("6"), Operator("*"), Digit("7"), Equals()])
    assert view.display_text == "42"


def test_regression_script_passes(capsys):
    from regression_engine_checks import run_regressions

    run_regressions()
    assert "All regression checks passed." in capsys.readouterr().out


# --- Literales pequeños y punto decimal tras resultado ---

def test_small_percent_uses_exponent_below_one_millionth(engine):
    assert press(engine, ".00005%").display_text == "5e-7"
    engine.apply(Clear())
    assert press(engine, ".000005N").display_text == "-0.000005"


def test_decimal_right_after_result_starts_fresh(engine):
    view = press(engine, "5+3=.")
    assert view.display_text == "0."
    assert view.finished_expression_text == ""
    assert press(engine, "5").display_text == "0.5"
