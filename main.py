"""Punto de entrada de la calculadora."""

import logging
import os
import tkinter as tk

from app_settings import StateFile
from calculator_engine import CalculatorEngine
from calculator_ui import CalculatorApp


LOG_LEVEL_ENV_VAR = "CALCULADORA_LOG_LEVEL"


def configure_logging():
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    state_file = StateFile()
    settings, history = state_file.load()

    root = tk.Tk()
    root.geometry("400x640")
    root.minsize(360, 600)
    engine = CalculatorEngine(history_sink=history)
    app = CalculatorApp(
        root,
        engine=engine,
        history=history,
        settings=settings,
        on_change=state_file.save,
    )
    root.mainloop()
    state_file.save(app.settings, app.history)


if __name__ == "__main__":
    main()
