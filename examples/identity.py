# Copyright (c) 2026 Signer — MIT License

"""Identity Bound Accounts: derive a mnemonic from an identity document and a PIN."""

import os
import sys
import threading

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(SCRIPT_DIR)
sys.path.insert(0, PROJECT_DIR)

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLineEdit, QLabel, QScrollArea, QFrame, QPushButton, QProgressBar,
)
from PySide6.QtCore import Qt, Signal, QTimer
from PySide6.QtGui import QFont

from iba import IdentityError, derive_mnemonic, fields_fingerprint, validate_input
from iba.cli import FIELDS, ROWS
from iba.seed import CHAINS, PHRASE_LENGTHS


# ── Light theme styles ─────────────────────────────────────

STYLE = """
QMainWindow { background: #f5f5f7; }
QScrollArea { border: none; background: transparent; }
QScrollBar:vertical {
    background: #ececee; width: 6px; border-radius: 3px; margin: 4px 2px;
}
QScrollBar::handle:vertical {
    background: #c0c0c8; border-radius: 3px; min-height: 40px;
}
QScrollBar::handle:vertical:hover { background: #a0a0b0; }
QScrollBar::add-line:vertical, QScrollBar::sub-line:vertical { height: 0; }
"""

FIELD_INPUT = (
    "QLineEdit { background: #ffffff; color: #2c2c3a; border: 1px solid #e4e4ec;"
    " border-radius: 8px; font-size: 13px; padding: 5px 8px;"
    " selection-background-color: #c0c8e0; }"
    "QLineEdit:focus { border: 1px solid #a0a8c8; }"
)
FIELD_LABEL = "color: #6a6a80; font-size: 11px; background: none; border: none;"

TOGGLE_ACTIVE = (
    "QPushButton { background: #2c2c3a; color: #ffffff; border: none;"
    " border-radius: 10px; font-size: 12px; font-weight: 600; padding: 4px 14px; }"
)
TOGGLE_INACTIVE = (
    "QPushButton { background: #e8e8f0; color: #6a6a80; border: none;"
    " border-radius: 10px; font-size: 12px; font-weight: 500; padding: 4px 14px; }"
    "QPushButton:hover { background: #dcdce8; }"
)
DERIVE_BTN = (
    "QPushButton { background: #2a9a5a; color: #ffffff; border: none;"
    " border-radius: 10px; font-size: 13px; font-weight: 600; padding: 6px 20px; }"
    "QPushButton:hover { background: #23884e; }"
    "QPushButton:pressed { background: #1d7542; }"
    "QPushButton:disabled { background: #a0c8b0; }"
)
SMALL_BTN = (
    "QPushButton { background: #e8e8f0; color: #6a6a80; border: none;"
    " border-radius: 10px; font-size: 11px; font-weight: 500; padding: 4px 10px; }"
    "QPushButton:hover { background: #dcdce8; }"
)
STATUS_OK = "color: #2a9a5a; font-size: 12px; font-weight: 600; border: none; background: none;"
STATUS_ERROR = "color: #d04040; font-size: 11px; border: none; background: none;"
STATUS_IDLE = "color: #9898a8; font-size: 12px; border: none; background: none;"


def _toggle_group(labels, active, on_click, layout):
    """Row of toggle buttons; returns {label: button}."""
    buttons = {}
    for label in labels:
        btn = QPushButton(str(label))
        btn.setFixedHeight(28)
        btn.setCursor(Qt.PointingHandCursor)
        btn.setStyleSheet(TOGGLE_ACTIVE if label == active else TOGGLE_INACTIVE)
        btn.clicked.connect(lambda _=False, v=label: on_click(v))
        layout.addWidget(btn)
        buttons[label] = btn
    return buttons


def _restyle(buttons, active):
    for label, btn in buttons.items():
        btn.setStyleSheet(TOGGLE_ACTIVE if label == active else TOGGLE_INACTIVE)


class IdentityWindow(QMainWindow):
    _result_ready = Signal(int, str, str, str)  # (version, label, sentence, fingerprint)
    _error = Signal(int, str)              # (version, message)

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Identity Bound Accounts")
        self.setMinimumSize(500, 600)
        self.resize(560, 820)
        self.setStyleSheet(STYLE)
        self.mode = "manual"
        self.chain = "ETH"
        self.words = 12
        self._version = 0  # Tracks async derivation freshness
        self._result_ready.connect(self._on_result)
        self._error.connect(self._on_error)

        central = QWidget()
        central.setStyleSheet("background: #f5f5f7;")
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(20, 16, 20, 16)
        main_layout.setSpacing(0)

        # Header
        title = QLabel("Identity Bound Accounts")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(
            "color: #1a1a2a; font-size: 22px; font-weight: 700; letter-spacing: 1px;"
        )
        main_layout.addWidget(title)

        subtitle = QLabel("The same document and PIN always give the same sentence")
        subtitle.setAlignment(Qt.AlignCenter)
        subtitle.setStyleSheet("color: #8888a0; font-size: 12px;")
        main_layout.addWidget(subtitle)
        main_layout.addSpacing(12)

        # Controls row: [Manual] [MRZ]  ...  [ETH] [BTC] [SOL]  [12] [18] [24]
        controls = QHBoxLayout()
        controls.setSpacing(6)
        self.mode_buttons = _toggle_group(("manual", "MRZ"), "manual", self._set_mode, controls)
        controls.addStretch()
        self.chain_buttons = _toggle_group(CHAINS, self.chain, self._set_chain, controls)
        controls.addSpacing(8)
        self.word_buttons = _toggle_group(tuple(PHRASE_LENGTHS), self.words, self._set_words, controls)
        main_layout.addLayout(controls)
        main_layout.addSpacing(8)

        # Manual form
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        container = QWidget()
        container.setStyleSheet("background: transparent;")
        grid = QGridLayout(container)
        grid.setContentsMargins(0, 0, 4, 0)
        grid.setHorizontalSpacing(10)
        grid.setVerticalSpacing(4)
        self.field_inputs = {}
        for i, (field, label) in enumerate(FIELDS):
            lbl = QLabel(label)
            lbl.setStyleSheet(FIELD_LABEL)
            edit = QLineEdit()
            edit.setStyleSheet(FIELD_INPUT)
            grid.addWidget(lbl, i, 0)
            grid.addWidget(edit, i, 1)
            self.field_inputs[field] = edit
        grid.setRowStretch(len(FIELDS), 1)
        scroll.setWidget(container)
        self.manual_panel = scroll
        main_layout.addWidget(scroll, 1)

        # MRZ rows
        self.mrz_panel = QFrame()
        mrz_lay = QVBoxLayout(self.mrz_panel)
        mrz_lay.setContentsMargins(0, 0, 0, 0)
        mrz_lay.setSpacing(6)
        mono = QFont("monospace")
        mono.setStyleHint(QFont.Monospace)
        self.row_inputs = {}
        for row in ROWS:
            edit = QLineEdit()
            edit.setFont(mono)
            edit.setMaxLength(44)
            edit.setPlaceholderText(
                f"{row} (leave empty for two-row passports)" if row == "row3" else row
            )
            edit.setStyleSheet(FIELD_INPUT)
            mrz_lay.addWidget(edit)
            self.row_inputs[row] = edit
        mrz_lay.addStretch()
        self.mrz_panel.hide()
        main_layout.addWidget(self.mrz_panel, 1)

        # PIN
        pin_frame = QFrame()
        pin_frame.setFixedHeight(44)
        pin_frame.setStyleSheet(
            "QFrame { background: #ffffff; border: 1px solid #e4e4ec; border-radius: 10px; }"
        )
        pin_lay = QHBoxLayout(pin_frame)
        pin_lay.setContentsMargins(16, 0, 16, 0)
        pin_lay.setSpacing(10)

        self.pin_input = QLineEdit()
        self.pin_input.setPlaceholderText("PIN (4-12 digits)")
        self.pin_input.setEchoMode(QLineEdit.Password)
        self.pin_input.setMaxLength(12)
        self.pin_input.setStyleSheet(
            "QLineEdit { background: transparent; color: #2c2c3a; border: none;"
            " font-size: 13px; padding: 0; selection-background-color: #c0c8e0; }"
        )
        pin_lay.addWidget(self.pin_input, 1)

        self.derive_btn = QPushButton("Derive")
        self.derive_btn.setFixedHeight(28)
        self.derive_btn.setCursor(Qt.PointingHandCursor)
        self.derive_btn.setStyleSheet(DERIVE_BTN)
        self.derive_btn.clicked.connect(self._derive)
        pin_lay.addWidget(self.derive_btn)

        main_layout.addSpacing(8)
        main_layout.addWidget(pin_frame)

        pin_warn = QLabel("Losing your PIN means losing access to the account.")
        pin_warn.setStyleSheet(
            "color: #b08030; font-size: 10px; font-style: italic;"
            " background: none; padding: 0 4px;"
        )
        main_layout.addWidget(pin_warn)

        self.progress = QProgressBar()
        self.progress.setFixedHeight(3)
        self.progress.setTextVisible(False)
        self.progress.setRange(0, 1)
        self.progress.setStyleSheet(
            "QProgressBar { background: #e8e8f0; border: none; border-radius: 1px; }"
            "QProgressBar::chunk { background: #2a9a5a; border-radius: 1px; }"
        )
        main_layout.addSpacing(6)
        main_layout.addWidget(self.progress)

        # Status + result
        self.status_label = QLabel("Fill in the document and PIN")
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet(STATUS_IDLE)
        main_layout.addSpacing(6)
        main_layout.addWidget(self.status_label)

        result_row = QHBoxLayout()
        self.sentence_label = QLabel("")
        self.sentence_label.setWordWrap(True)
        self.sentence_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.sentence_label.setStyleSheet(
            "color: #2c2c3a; font-size: 14px; font-family: monospace; background: none;"
        )
        result_row.addWidget(self.sentence_label, 1)

        self.fp_label = QLabel("")
        self.fp_label.setStyleSheet(
            "color: #2a9a5a; font-size: 15px; font-weight: 700;"
            " font-family: monospace; letter-spacing: 3px; background: none;"
        )
        result_row.addWidget(self.fp_label)

        self.copy_btn = QPushButton("Copy")
        self.copy_btn.setFixedHeight(28)
        self.copy_btn.setCursor(Qt.PointingHandCursor)
        self.copy_btn.setStyleSheet(SMALL_BTN)
        self.copy_btn.clicked.connect(self._copy_sentence)
        self.copy_btn.hide()
        result_row.addWidget(self.copy_btn)
        main_layout.addLayout(result_row)

    # ── toggles ────────────────────────────────────────────
    def _set_mode(self, mode):
        self.mode = mode
        _restyle(self.mode_buttons, mode)
        self.manual_panel.setVisible(mode == "manual")
        self.mrz_panel.setVisible(mode == "MRZ")
        self._clear_result()

    def _set_chain(self, chain):
        self.chain = chain
        _restyle(self.chain_buttons, chain)
        self._clear_result()

    def _set_words(self, words):
        self.words = words
        _restyle(self.word_buttons, words)
        self._clear_result()

    # ── derivation ─────────────────────────────────────────
    def _document(self):
        if self.mode == "MRZ":
            return {row: e.text().strip() for row, e in self.row_inputs.items() if e.text().strip()}
        return {f: e.text().strip() for f, e in self.field_inputs.items() if e.text().strip()}

    def _derive(self):
        """Spawn one background thread for derivation (the KDF is slow)."""
        self._version += 1
        version = self._version
        entered_pin = self.pin_input.text()
        document = self._document()
        chain, words = self.chain, self.words

        self._clear_result()
        self.derive_btn.setEnabled(False)
        self.progress.setRange(0, 0)
        self.status_label.setText("deriving...")
        self.status_label.setStyleSheet(STATUS_IDLE)

        def _run():
            try:
                pin, fields = validate_input(document, entered_pin)
                sentence = derive_mnemonic(pin, fields, words=words, chain=chain)
                fp = fields_fingerprint(pin, fields)
            except IdentityError as e:
                self._error.emit(version, "\n".join(e.violations))
                return
            self._result_ready.emit(version, f"{words}-word {chain} account", sentence, fp)
        threading.Thread(target=_run, daemon=True).start()

    def _finish(self):
        self.derive_btn.setEnabled(True)
        self.progress.setRange(0, 1)
        self.progress.setValue(1)

    def _on_result(self, version, label, sentence, fp):
        if version != self._version:
            return
        self._finish()
        self.status_label.setText(label)
        self.status_label.setStyleSheet(STATUS_OK)
        self.sentence_label.setText(sentence)
        self.fp_label.setText(fp)
        self.copy_btn.show()

    def _on_error(self, version, message):
        if version != self._version:
            return
        self._finish()
        self.status_label.setText(message)
        self.status_label.setStyleSheet(STATUS_ERROR)

    def _clear_result(self):
        self.sentence_label.setText("")
        self.fp_label.setText("")
        self.copy_btn.hide()

    def _copy_sentence(self):
        text = self.sentence_label.text()
        if not text:
            return
        QApplication.clipboard().setText(text)
        self.copy_btn.setText("Copied!")
        QTimer.singleShot(1200, lambda: self.copy_btn.setText("Copy"))


if __name__ == "__main__":
    app = QApplication(sys.argv)
    window = IdentityWindow()
    window.show()
    sys.exit(app.exec())
