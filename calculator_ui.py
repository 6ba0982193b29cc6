"""
Interfaz gráfica de la calculadora.

Usa tkinter. La interfaz no contiene lógica de cálculo: traduce
pulsaciones de botones y teclado en comandos del motor y pinta la
vista que este devuelve.
"""

import tkinter as tk
from tkinter import font as tkfont
from tkinter import messagebox

from app_settings import BUTTON_COLORS, Settings
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
    command_for_key,
)
from calculator_engine import CalculatorEngine
from display_formatter import DisplayFormatter
from history_store import HistoryStore
from translations import LANGUAGES, strings_for


# ═════════════════════════════════════════════════════════════════
#  Paletas
# ═════════════════════════════════════════════════════════════════

THEMES = {
    "dark": {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#A6E3A1",
    },
    "light": {
        "bg":         "#EFF1F5",
        "display_bg": "#E6E9EF",
        "num":        "#FFFFFF",
        "num_fg":     "#4C4F69",
        "op":         "#D20F39",
        "op_fg":      "#FFFFFF",
        "func":       "#CCD0DA",
        "func_fg":    "#4C4F69",
        "special":    "#BCC0CC",
        "special_fg": "#4C4F69",
        "equals":     "#1E66F5",
        "equals_fg":  "#FFFFFF",
        "expr_fg":    "#6C6F85",
        "result_fg":  "#4C4F69",
    },
}

# Acento opcional de los botones numéricos
BUTTON_ACCENTS = {
    "default": None,
    "violet":  "#8B5CF6",
    "emerald": "#10B981",
    "rose":    "#F43F5E",
    "amber":   "#F59E0B",
    "slate":   "#64748B",
}


def wire_history(engine=None, history=None):
    """Devuelve (motor, historial) garantizando que comparten el mismo almacén.

    Raises:
        ValueError: el motor no tiene historial o usa uno distinto.
    """
    if engine is None:
        history = history if history is not None else HistoryStore()
        return CalculatorEngine(history_sink=history), history

    sink = engine.history_sink
    if sink is None:
        raise ValueError("El motor no tiene historial asociado")
    if history is not None and history is not sink:
        raise ValueError("El historial no coincide con el del motor")
    return engine, sink


# ═════════════════════════════════════════════════════════════════
#  Aplicación principal
# ═════════════════════════════════════════════════════════════════

class CalculatorApp:
    """Ventana principal de la calculadora."""

    # ── Definiciones del teclado estándar ────────────────────────
    #  Cada fila es una lista de (texto, comando, tipo_color)

    KEYPAD = [
        [("AC", Clear(), "special"), ("⌫", Backspace(), "special"),
         ("%", Percent(), "special"), ("÷", Operator("/"), "op")],

        [("7", Digit("7"), "num"), ("8", Digit("8"), "num"),
         ("9", Digit("9"), "num"), ("×", Operator("*"), "op")],

        [("4", Digit("4"), "num"), ("5", Digit("5"), "num"),
         ("6", Digit("6"), "num"), ("−", Operator("-"), "op")],

        [("1", Digit("1"), "num"), ("2", Digit("2"), "num"),
         ("3", Digit("3"), "num"), ("+", Operator("+"), "op")],

        [(".", DecimalPoint(), "num"), ("0", Digit("0"), "num"),
         ("+/-", Negate(), "num"), ("=", Equals(), "equals")],
    ]

    # ── Panel científico ─────────────────────────────────────────
    #  "(" y ")" son decorativos: no hay analizador de expresiones.

    SCIENCE_KEYPAD = [
        [("sin", ScientificFn("sin")), ("cos", ScientificFn("cos")),
         ("tan", ScientificFn("tan")), ("log", ScientificFn("log10"))],

        [("ln", ScientificFn("ln")), ("√", ScientificFn("sqrt")),
         ("x²", ScientificFn("square")), ("xʸ", Operator("^"))],

        [("(", None), (")", None),
         ("π", ScientificFn("pi")), ("e", ScientificFn("e"))],
    ]

    HISTORY_ROWS = 12

    # ────────────────────────────────────────────────────────────

    def __init__(self, root: tk.Tk, engine=None, history=None,
                 settings: Settings | None = None, on_change=None):
        self.root = root
        self.settings = settings if settings is not None else Settings()
        self.engine, self.history = wire_history(engine, history)
        self._on_change = on_change
        self._history_window = None

        self.root.resizable(False, False)
        self._init_fonts()
        self._build()
        self._bind_keyboard()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_expr   = tkfont.Font(family="Consolas", size=14)
        self._f_result = tkfont.Font(family="Consolas", size=28, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=15)
        self._f_func   = tkfont.Font(family="Segoe UI", size=12)
        self._f_small  = tkfont.Font(family="Segoe UI", size=10)

    # ── Construcción ─────────────────────────────────────────────

    @property
    def C(self) -> dict:
        return THEMES[self.settings.theme]

    @property
    def t(self) -> dict:
        return strings_for(self.settings.language)

    def _build(self):
        """(Re)construye toda la ventana con el tema e idioma actuales."""
        for child in self.root.winfo_children():
            if child is not self._history_window:
                child.destroy()

        self.root.title(self.t["app_name"])
        self.root.configure(bg=self.C["bg"])
        self.engine.formatter = DisplayFormatter(error_text=self.t["error"])

        self._create_toolbar()
        self._create_display()
        self._create_science_panel()
        self._create_keypad()
        self._refresh()

    def _create_toolbar(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=(6, 2))

        def small_button(text, command):
            tk.Button(
                frame, text=text, font=self._f_small,
                bg=self.C["func"], fg=self.C["func_fg"],
                activebackground=self.C["special"], relief="flat",
                cursor="hand2", command=command, padx=8,
            ).pack(side="left", padx=(0, 4))

        small_button(self.t["history"], self._show_history)
        tk.Label(
            frame, text=f"{self.t['settings']}:", font=self._f_small,
            bg=self.C["bg"], fg=self.C["expr_fg"],
        ).pack(side="left", padx=(8, 4))
        small_button(self.t["dark_mode"], self._toggle_theme)
        small_button(
            f"{self.t['language']}: {self.settings.language.upper()}",
            self._cycle_language,
        )
        small_button(self.t["num_btn_color"], self._cycle_button_color)

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(2, 2))

        self.expr_var = tk.StringVar()
        tk.Label(
            frame, textvariable=self.expr_var, font=self._f_expr,
            bg=self.C["display_bg"], fg=self.C["expr_fg"], anchor="e",
        ).pack(fill="x", pady=(4, 0))

        self.result_var = tk.StringVar(value="0")
        tk.Label(
            frame, textvariable=self.result_var, font=self._f_result,
            bg=self.C["display_bg"], fg=self.C["result_fg"], anchor="e",
        ).pack(fill="x", pady=(2, 4))

    def _create_section_header(self, text: str):
        tk.Label(
            self.root, text=text, font=self._f_small, anchor="w",
            bg=self.C["bg"], fg=self.C["expr_fg"],
        ).pack(fill="x", padx=8, pady=(4, 0))

    def _create_science_panel(self):
        self._create_section_header(self.t["scientific"])
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=2)
        for col in range(4):
            frame.columnconfigure(col, weight=1, uniform="sci")

        for r, row_def in enumerate(self.SCIENCE_KEYPAD):
            for c, (text, command) in enumerate(row_def):
                btn = tk.Button(
                    frame, text=text, font=self._f_func,
                    bg=self.C["func"], fg=self.C["func_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda cmd=command: self._on_command(cmd),
                )
                btn.grid(row=r, column=c, sticky="nsew", padx=2, pady=2,
                         ipady=4)

    def _create_keypad(self):
        self._create_section_header(self.t["standard"])
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))
        for c in range(4):
            frame.columnconfigure(c, weight=1, uniform="key")

        accent = BUTTON_ACCENTS[self.settings.button_color]
        for r, row_def in enumerate(self.KEYPAD):
            for c, (text, command, kind) in enumerate(row_def):
                bg = self.C[kind]
                fg = self.C[f"{kind}_fg"]
                if kind == "num" and accent is not None:
                    fg = accent
                btn = tk.Button(
                    frame, text=text, font=self._f_btn,
                    bg=bg, fg=fg, activebackground=self.C["special"],
                    relief="flat",
                    command=lambda cmd=command: self._on_command(cmd),
                )
                btn.grid(row=r, column=c, sticky="nsew", padx=2, pady=2,
                         ipady=8)
            frame.rowconfigure(r, weight=1)

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_keypress)

    def _on_keypress(self, event):
        command = command_for_key(event.char) if event.char else None
        if command is None:
            command = command_for_key(event.keysym)
        if command is not None:
            self._on_command(command)
            return "break"
        return None

    # ── Acciones ─────────────────────────────────────────────────

    def _on_command(self, command):
        if command is None:
            return
        before = len(self.history)
        self.engine.apply(command)
        self._refresh()
        if len(self.history) != before or isinstance(command, Equals):
            self._notify_change()

    def _refresh(self):
        view = self.engine.view()
        self.result_var.set(view.display_text)
        self.expr_var.set(view.expression_text)

    def _notify_change(self):
        if self._on_change is not None:
            self._on_change(self.settings, self.history)

    # ── Preferencias ─────────────────────────────────────────────

    def _toggle_theme(self):
        self.settings = self.settings.toggled_theme()
        self._close_history()
        self._build()
        self._notify_change()

    def _cycle_language(self):
        idx = LANGUAGES.index(self.settings.language)
        self.settings = Settings(
            LANGUAGES[(idx + 1) % len(LANGUAGES)],
            self.settings.theme,
            self.settings.button_color,
        )
        self._close_history()
        self._build()
        self._notify_change()

    def _cycle_button_color(self):
        idx = BUTTON_COLORS.index(self.settings.button_color)
        self.settings = Settings(
            self.settings.language,
            self.settings.theme,
            BUTTON_COLORS[(idx + 1) % len(BUTTON_COLORS)],
        )
        self._build()
        self._notify_change()

    # ── Historial ────────────────────────────────────────────────

    def _show_history(self):
        self._close_history()
        win = tk.Toplevel(self.root, bg=self.C["bg"])
        win.title(self.t["history_title"])
        self._history_window = win

        entries = list(self.history)
        if not entries:
            tk.Label(
                win, text=self.t["no_records"], font=self._f_func,
                bg=self.C["bg"], fg=self.C["expr_fg"], padx=20, pady=20,
            ).pack()
        else:
            listbox = tk.Listbox(
                win, font=self._f_expr, width=32, height=self.HISTORY_ROWS,
                bg=self.C["display_bg"], fg=self.C["num_fg"],
                relief="flat", activestyle="none",
            )
            formatter = self.engine.formatter
            for entry in entries:
                stamp = entry.timestamp.astimezone().strftime("%d.%m %H:%M")
                listbox.insert(
                    "end",
                    f"{entry.expression} = {formatter.render(entry.result)}  ({stamp})",
                )
            listbox.pack(fill="both", expand=True, padx=6, pady=6)
            listbox.bind(
                "<<ListboxSelect>>",
                lambda _e: self._select_history(listbox, entries),
            )

        row = tk.Frame(win, bg=self.C["bg"])
        row.pack(fill="x", padx=6, pady=(0, 6))
        tk.Button(
            row, text=self.t["clear_all"], font=self._f_small,
            bg=self.C["op"], fg=self.C["op_fg"], relief="flat",
            command=self._confirm_clear_history, state="normal" if entries else "disabled",
        ).pack(side="left")
        tk.Button(
            row, text=self.t["close"], font=self._f_small,
            bg=self.C["func"], fg=self.C["func_fg"], relief="flat",
            command=self._close_history,
        ).pack(side="right")

    def _select_history(self, listbox, entries):
        selection = listbox.curselection()
        if not selection:
            return
        self._on_command(LoadFromHistory(entries[selection[0]]))
        self._close_history()

    def _confirm_clear_history(self):
        if messagebox.askyesno(self.t["confirm_delete_title"],
                               self.t["confirm_delete_desc"],
                               parent=self._history_window):
            self.history.clear()
            self._notify_change()
            self._show_history()

    def _close_history(self):
        if self._history_window is not None:
            self._history_window.destroy()
            self._history_window = None
