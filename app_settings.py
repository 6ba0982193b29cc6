"""Preferencias de la aplicación y persistencia en disco (JSON)."""

import json
import locale
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from history_store import HISTORY_LIMIT, HistoryStore
from translations import DEFAULT_LANGUAGE, LANGUAGES


logger = logging.getLogger(__name__)

THEMES = ("dark", "light")
BUTTON_COLORS = ("default", "violet", "emerald", "rose", "amber", "slate")

HOME_ENV_VAR = "CALCULADORA_HOME"
STATE_FILE_NAME = "state.json"


def detect_language() -> str:
    """Idioma inicial según el locale del sistema (``tr*`` → ``tr``)."""
    code = locale.getlocale()[0] or os.environ.get("LANG", "")
    return "tr" if code.lower().startswith("tr") else DEFAULT_LANGUAGE


@dataclass
class Settings:
    language: str = DEFAULT_LANGUAGE
    theme: str = "light"
    button_color: str = "default"

    def __post_init__(self):
        if self.language not in LANGUAGES:
            raise ValueError(f"Idioma no soportado: {self.language!r}")
        if self.theme not in THEMES:
            raise ValueError(f"Tema no soportado: {self.theme!r}")
        if self.button_color not in BUTTON_COLORS:
            raise ValueError(f"Color no soportado: {self.button_color!r}")

    def toggled_theme(self) -> "Settings":
        theme = "light" if self.theme == "dark" else "dark"
        return Settings(self.language, theme, self.button_color)


def default_state_path() -> Path:
    home = os.environ.get(HOME_ENV_VAR)
    base = Path(home) if home else Path.home() / ".calculadora"
    return base / STATE_FILE_NAME


class StateFile:
    """Lee y escribe preferencias e historial en un único archivo JSON."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path is not None else default_state_path()

    def load(self) -> tuple[Settings, HistoryStore]:
        """Carga el estado guardado; ante cualquier problema usa valores por defecto."""
        defaults = Settings(language=detect_language())
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return defaults, HistoryStore()
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("No se pudo leer %s: %s", self.path, exc)
            return defaults, HistoryStore()

        if not isinstance(raw, dict):
            logger.warning("Formato inesperado en %s", self.path)
            return defaults, HistoryStore()

        try:
            settings = Settings(**raw.get("settings", {}))
        except (TypeError, ValueError) as exc:
            logger.warning("Preferencias inválidas, se usan las de por defecto: %s", exc)
            settings = defaults

        try:
            history = HistoryStore.from_dicts(raw.get("history", []), limit=HISTORY_LIMIT)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Historial inválido, se descarta: %s", exc)
            history = HistoryStore()

        return settings, history

    def save(self, settings: Settings, history: HistoryStore) -> bool:
        payload = {"settings": asdict(settings), "history": history.to_dicts()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("No se pudo guardar %s: %s", self.path, exc)
            return False
        return True
