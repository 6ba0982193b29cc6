import re
from pathlib import Path

import pytest

pytest.importorskip("tkinter")

from calculator_engine import CalculatorEngine
from calculator_ui import wire_history
from history_store import HistoryStore
from translations import TRANSLATIONS


def test_wire_history_defaults_share_store():
    engine, history = wire_history()
    assert engine.history_sink is history


def test_wire_history_takes_store_from_engine():
    store = HistoryStore()
    engine, history = wire_history(engine=CalculatorEngine(history_sink=store))
    assert history is store


def test_wire_history_uses_given_store_for_new_engine():
    store = HistoryStore()
    engine, history = wire_history(history=store)
    assert history is store
    assert engine.history_sink is store


def test_wire_history_rejects_engine_without_sink():
    with pytest.raises(ValueError):
        wire_history(engine=CalculatorEngine())


def test_wire_history_rejects_mismatched_store():
    engine = CalculatorEngine(history_sink=HistoryStore())
    with pytest.raises(ValueError):
        wire_history(engine=engine, history=HistoryStore())


def test_every_translation_key_is_used_by_the_window():
    source = Path(__file__).with_name("calculator_ui.py").read_text(encoding="utf-8")
    used = set(re.findall(r"self\.t\[[\"'](\w+)[\"']\]", source))
    assert set(TRANSLATIONS["en"]) == set(TRANSLATIONS["tr"])
    assert set(TRANSLATIONS["en"]) == used
