from calculator_commands import Backspace, Clear, LoadFromHistory, Negate, ScientificFn, command_for_key
from calculator_engine import CalculatorEngine
from display_formatter import parse_rendered, render
from history_store import HistoryEntry, HistoryStore
import sys


_EXTRA_KEYS = {
	"C": Clear(),
	"N": Negate(),
	"<": Backspace(),
	"r": ScientificFn("sqrt"),
	"q": ScientificFn("square"),
}


def _commands(keys: str):
	commands = []
	for key in keys:
		command = _EXTRA_KEYS.get(key) or command_for_key(key)
		if command is None:
			raise SystemExit(f"Unknown key: {key!r}")
		commands.append(command)
	return commands


def _run(keys: str, engine: CalculatorEngine | None = None):
	history = HistoryStore()
	engine = engine if engine is not None else CalculatorEngine(history_sink=history)
	views = [engine.apply(command) for command in _commands(keys)]
	return engine, history, views


def trace(keys: str) -> None:
	"""Imprime la vista después de cada tecla."""
	_, history, views = _run(keys)

	print("Key trace")
	print(f"keys:      {keys}")
	for key, view in zip(keys, views):
		print(f"  {key!r:>5}  {view.display_text:>16}   {view.expression_text}")
	print(f"history:   {len(history)} entries")
	for entry in history:
		print(f"  {entry.expression} = {entry.result}")


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	_, history, views = _run("2+3*4=")
	expected_actual.append(("2+3*4=", "20", views[-1].display_text))
	checks.append(("chain folds left to right", views[-1].display_text == "20"))
	checks.append(("fold shows intermediate", views[3].display_text == "5"))
	checks.append(("chain emits one entry", len(history) == 1))

	engine, _, views = _run("7/0=")
	checks.append(("division by zero shows error", views[-1].display_text == "Error"))
	checks.append(("clear recovers from error", engine.apply(Clear()).display_text == "0"))

	_, history, views = _run("5+3==")
	expected_actual.append(("5+3==", "11", views[-1].display_text))
	checks.append(("repeat equals repeats last operand", views[-1].display_text == "11"))
	checks.append(("repeat equals is recorded", len(history) == 2))

	_, _, views = _run("<")
	checks.append(("backspace on zero keeps zero", views[-1].display_text == "0"))
	_, _, views = _run("5N<<")
	checks.append(("backspace on -5 twice gives zero", views[-1].display_text == "0"))

	checks.append(("grouping of integer part", render(1234567.5) == "1,234,567.5"))
	checks.append(("overflow without redundant .0", render(1e15) == "1e+15"))
	checks.append((
		"render is idempotent",
		all(render(parse_rendered(render(x))) == render(x) for x in (0.5, 42.0, 98765.25)),
	))

	_, history, views = _run("9Nr")
	checks.append(("sqrt of negative shows error", views[-1].display_text == "Error"))
	checks.append((
		"sqrt of negative is still recorded",
		history.latest() is not None and history.latest().expression == "√(-9)",
	))

	_, history, views = _run("5+3=q=")
	checks.append(("scientific ends repeat equals", views[-1].display_text == "64" and len(history) == 2))

	engine = CalculatorEngine()
	engine.apply(LoadFromHistory(HistoryEntry(expression="12 + 4", result="16")))
	_, _, views = _run("7+1=", engine)
	expected_actual.append(("load 16 then 7+1=", "8", views[-1].display_text))
	checks.append(("digit after loading starts fresh", views[0].finished_expression_text == ""))
	checks.append(("loaded result is not reused", views[-1].display_text == "8"))

	_, _, views = _run(".1+.2=")
	expected_actual.append((".1+.2=", "0.3", views[-1].display_text))
	checks.append(("equals rounds noise", views[-1].display_text == "0.3"))

	failed = [name for name, ok in checks if not ok]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		status = "OK" if expected == actual else "FAIL"
		print(f"- {label}: {status}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_engine_checks.py
	#   python regression_engine_checks.py --trace "2+3*4="
	# Teclas extra: C=AC, N=+/-, <=borrar, r=√, q=x²
	if "--trace" in sys.argv:
		try:
			keys = sys.argv[sys.argv.index("--trace") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing keys after --trace")
		trace(keys)
	else:
		run_regressions()
