import logging
import sys
from math import cos, sin, radians
from typing import Any
from PySide6.QtCore import Qt, QThread, Signal, QTimer, QPropertyAnimation
from PySide6.QtGui import QFont, QPalette, QColor, QPainter, QPen, QBrush, QPainterPath
from PySide6.QtWidgets import (
QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
QLineEdit, QPlainTextEdit, QPushButton, QScrollArea, QFrame, QToolButton,
QDialog, QDialogButtonBox, QComboBox, QDoubleSpinBox, QGraphicsOpacityEffect
)
from replygen import config
from replygen.config import setup_logging
from replygen.controller import ReplyController
from replygen.schema import ReplyRequest, TONE_CHOICES
from ui.backdrop import start_backdrop
from ui.worker import ReplyWorker

logger = logging.getLogger(__name__)

class ReplyCard(QWidget):
    """Read-only view of the generated reply with a copy button."""
    copyRequested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("card")
        outer = QVBoxLayout(self)
        outer.setContentsMargins(16, 12, 16, 12)
        outer.setSpacing(8)

        self.title_lbl = QLabel("Generated Reply")
        self.title_lbl.setObjectName("cardTitle")
        outer.addWidget(self.title_lbl)

        self.editor = QPlainTextEdit()
        self.editor.setObjectName("replyText")
        self.editor.setReadOnly(True)
        self.editor.setMinimumHeight(180)
        outer.addWidget(self.editor)

        self.copy_btn = QPushButton("Copy to Clipboard")
        self.copy_btn.setObjectName("copyBtn")
        self.copy_btn.clicked.connect(self._on_copy_clicked)
        outer.addWidget(self.copy_btn, alignment=Qt.AlignLeft)

    def set_text(self, text: str):
        self.editor.setPlainText(text or "")

    def _on_copy_clicked(self):
        self.copyRequested.emit()
        # Feedback: swap label for 1.5s
        self.copy_btn.setText("Copied!")
        QTimer.singleShot(1500, lambda: self.copy_btn.setText("Copy to Clipboard"))


class Spinner(QWidget):
    """Tiny, smooth progress spinner (indeterminate)."""
    def __init__(self, parent=None, diameter: int = 14, line_width: int = 2, color: QColor | str = "#ffffff"):
        super().__init__(parent)
        self._diam = int(diameter)
        self._lw = int(line_width)
        self._color = QColor(color)
        self._angle = 0
        self.setFixedSize(self._diam, self._diam)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._timer.setInterval(16)

    def start(self):
        if not self._timer.isActive():
            self._timer.start()
        self.show()

    def stop(self):
        if self._timer.isActive():
            self._timer.stop()
        self.hide()

    def _tick(self):
        self._angle = (self._angle + 6) % 360
        self.update()

    def paintEvent(self, event):
        p = QPainter(self)
        try:
            p.setRenderHint(QPainter.Antialiasing, True)
            p.translate(self.width() / 2, self.height() / 2)
            p.rotate(self._angle)
            pen = QPen(self._color)
            pen.setWidth(self._lw)
            pen.setCapStyle(Qt.RoundCap)
            p.setPen(pen)
            r = (min(self.width(), self.height()) - self._lw) / 2.0
            # 280 degree arc leaves a gap
            path = QPainterPath()
            steps = 40
            for i in range(steps + 1):
                a = radians(280 * (i / steps))
                if i == 0:
                    path.moveTo(r * cos(a), r * sin(a))
                else:
                    path.lineTo(r * cos(a), r * sin(a))
            p.drawPath(path)
        finally:
            p.end()


class Toast(QWidget):
    """Green confirmation toast in the top-right corner; fades out on its own."""
    closed = Signal(object)

    def __init__(self, text: str, duration_ms: int = 3000, parent: QWidget | None = None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self._radius = 10
        self._duration = max(1200, int(duration_ms))
        self._bg = QColor("#ECFDF5")
        self._border = QColor("#e6e6e6")

        lay = QHBoxLayout(self)
        lay.setContentsMargins(12, 8, 12, 8)
        self._label = QLabel(text)
        self._label.setWordWrap(True)
        self._label.setStyleSheet("color: #1f2937;")
        lay.addWidget(self._label)

        self._fx = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self._fx)
        self._fx.setOpacity(0.0)
        self._fade = QPropertyAnimation(self._fx, b"opacity", self)
        self._fade.setDuration(180)

        self._hold = QTimer(self)
        self._hold.setSingleShot(True)
        self._hold.timeout.connect(self._fade_out)

    def show_with_fade(self):
        self.adjustSize()
        self._fade.stop()
        self._fade.setStartValue(0.0)
        self._fade.setEndValue(1.0)
        self._fade.start()
        self.show()
        self._hold.start(self._duration)

    def _fade_out(self):
        self._fade.stop()
        self._fade.setStartValue(self._fx.opacity())
        self._fade.setEndValue(0.0)
        self._fade.setDuration(200)
        def _done():
            self.closed.emit(self)
            self.hide()
            self.deleteLater()
        self._fade.finished.connect(_done)
        self._fade.start()

    def paintEvent(self, event):
        p = QPainter(self)
        try:
            p.setRenderHint(QPainter.Antialiasing, True)
            rect = self.rect().adjusted(0, 0, -1, -1)
            path = QPainterPath()
            path.addRoundedRect(rect, self._radius, self._radius)
            p.fillPath(path, QBrush(self._bg))
            pen = QPen(self._border)
            pen.setWidthF(1.0)
            p.setPen(pen)
            p.drawPath(path)
        finally:
            p.end()


class SettingsDialog(QDialog):
    def __init__(self, parent=None, current_url: str = config.DEFAULT_ENDPOINT_URL,
                 current_timeout: float = config.DEFAULT_TIMEOUT_S):
        super().__init__(parent)
        self.setObjectName("settingsDialog")
        self.setWindowTitle("Settings")
        self.setMinimumSize(520, 260)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 16, 18, 16)
        layout.setSpacing(10)

        header_font = QFont()
        header_font.setWeight(QFont.DemiBold)

        url_header = QLabel("Reply Endpoint")
        url_header.setFont(header_font)
        layout.addWidget(url_header)
        hint1 = QLabel("Leave empty to use the default service.")
        hint1.setStyleSheet("color: #6b7280;")
        hint1.setWordWrap(True)
        layout.addWidget(hint1)

        self.url_edit = QLineEdit(current_url)
        self.url_edit.setPlaceholderText(config.DEFAULT_ENDPOINT_URL)
        layout.addWidget(self.url_edit)

        layout.addSpacing(8)

        timeout_header = QLabel("Request Timeout")
        timeout_header.setFont(header_font)
        layout.addWidget(timeout_header)

        self.timeout_spin = QDoubleSpinBox()
        self.timeout_spin.setRange(1.0, 600.0)
        self.timeout_spin.setSuffix(" s")
        self.timeout_spin.setValue(current_timeout)
        layout.addWidget(self.timeout_spin)

        layout.addStretch(1)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)
        layout.addWidget(btns)

        self.setStyleSheet(
            """
            #settingsDialog { background: #ffffff; }
            QLabel { color: #1f2937; }
            QLineEdit, QDoubleSpinBox { background: #fff; border: 1px solid #e6e6e6; border-radius: 8px; padding: 6px 10px; color: #1f2937; }
            QDialogButtonBox QPushButton { padding: 8px 14px; border-radius: 10px; background: #f0f0f0; color: #1f2937; border: 1px solid #e6e6e6; }
            QDialogButtonBox QPushButton:hover { background: #e7e7e7; }
            QDialogButtonBox QPushButton:default { background: #1f2937; color: #ffffff; border: none; }
            """
        )


class MainWindow(QMainWindow):
    replyRequested = Signal(object) # ReplyRequest for the worker thread

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Email Reply Generator")
        self.resize(860, 760)
        self.setMinimumSize(520, 560)

        # State
        self.controller = ReplyController()
        self.controller.subscribe(lambda _c: self.refresh_view())
        self._start_worker_thread()

        # Top bar
        top_bar = QHBoxLayout()
        top_bar.setContentsMargins(24, 10, 24, 10)
        top_bar.setSpacing(12)

        self.logo_lbl = QLabel("Email Reply Generator")
        font = QFont()
        font.setPointSize(18)
        font.setWeight(QFont.DemiBold)
        self.logo_lbl.setFont(font)
        top_bar.addWidget(self.logo_lbl, alignment=Qt.AlignLeft)
        top_bar.addStretch(1)

        self.settings_btn = QToolButton()
        self.settings_btn.setObjectName("settingsBtn")
        self.settings_btn.setText("Settings")
        self.settings_btn.clicked.connect(self.show_settings)
        top_bar.addWidget(self.settings_btn, alignment=Qt.AlignRight)

        top_bar_widget = QWidget()
        top_bar_widget.setObjectName("topBar")
        top_bar_widget.setLayout(top_bar)
        top_bar_widget.setMinimumHeight(60)

        # Center: scrollable form
        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setFrameShape(QFrame.NoFrame)
        content = QWidget()
        self.center_layout = QVBoxLayout(content)
        self.center_layout.setContentsMargins(32, 24, 32, 24)
        self.center_layout.setSpacing(12)

        self.email_edit = QPlainTextEdit()
        self.email_edit.setObjectName("emailInput")
        self.email_edit.setPlaceholderText("Enter your email")
        self.email_edit.setMinimumHeight(180)
        self.email_edit.textChanged.connect(self.on_email_changed)

        self.tone_cmb = QComboBox()
        self.tone_cmb.setObjectName("toneSelect")
        for value, label in TONE_CHOICES:
            self.tone_cmb.addItem(label, value)
        self.tone_cmb.currentIndexChanged.connect(self.on_tone_changed)

        self.generate_btn = QPushButton("Generate Reply")
        self.generate_btn.setObjectName("generateBtn")
        self.generate_btn.clicked.connect(self.on_generate_clicked)
        self._proc_container = None
        self._spinner = None

        self.error_lbl = QLabel("")
        self.error_lbl.setObjectName("errorLabel")
        self.error_lbl.setWordWrap(True)

        self.reply_card = ReplyCard()
        self.reply_card.copyRequested.connect(self.on_copy_clicked)

        self.center_layout.addWidget(self.email_edit)
        self.center_layout.addWidget(self.tone_cmb)
        self.center_layout.addWidget(self.generate_btn)
        self.center_layout.addWidget(self.error_lbl)
        self.center_layout.addWidget(self.reply_card)
        self.center_layout.addStretch(1)
        self.scroll_area.setWidget(content)

        # Main layout
        central = QWidget()
        central.setObjectName("rootContainer")
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(top_bar_widget)
        layout.addWidget(self.scroll_area, 1)
        self.setCentralWidget(central)

        self.apply_styles()
        self.refresh_view()

        # Toast area for transient messages (top-right)
        self._toast_area = QWidget(self)
        self._toast_area.setAttribute(Qt.WA_TranslucentBackground, True)
        self._toast_area.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self._toast_layout = QVBoxLayout(self._toast_area)
        self._toast_layout.setContentsMargins(0, 0, 0, 0)
        self._toast_layout.setSpacing(8)
        self._toasts: list[Toast] = []
        self._position_toast_area()

        # Decorative flock; scheduled so it never delays or breaks the form
        self._backdrop = None
        QTimer.singleShot(0, self._init_backdrop)

    # ------- Styling -------
    def apply_styles(self):
        self.setStyleSheet("""
            QWidget#rootContainer { background: #f0f0f0; }
            #topBar { background: #ffffff; border-bottom: 1px solid #e6e6e6; }
            QToolButton#settingsBtn { border: none; background: transparent; color: #6b7280; padding: 6px 10px; }
            QToolButton#settingsBtn:hover { background: #ececec; border-radius: 4px; color: #1f2937; }
            QLabel { color: #1f2937; }
            QScrollArea, QScrollArea > QWidget, QScrollArea > QWidget > * { background: transparent; }
            QLabel#cardTitle { color: #1f2937; font-weight: 600; }
            QWidget#card { background: #ffffff; border: 1px solid #e6e6e6; border-radius: 10px; }
            QPlainTextEdit, QComboBox { background: rgba(255, 255, 255, 230); border: 1px solid #d1d5db; border-radius: 8px; padding: 8px 10px; font-size: 14px; color: #1f2937; }
            QComboBox QAbstractItemView { background: #fff; color: #1f2937; border: 1px solid #e6e6e6; selection-background-color: #ececec; }
            QPushButton#generateBtn {
                padding: 12px 16px;
                border-radius: 10px;
                background: #2563eb;
                color: white;
                font-weight: 600;
                border: none;
            }
            QPushButton#generateBtn:hover { background: #1d4ed8; }
            QPushButton#generateBtn:disabled { background: #9ca3af; }
            QPushButton#generateBtn[processing="true"]:disabled { background: #6b7280; }
            QLabel#errorLabel { color: #dc2626; background: #fee2e2; border-radius: 8px; padding: 10px; }
            QPushButton#copyBtn { padding: 8px 18px; border-radius: 8px; border: 1px solid #3b82f6; background: transparent; color: #2563eb; font-weight: 500; }
            QPushButton#copyBtn:hover { background: #eff6ff; }
        """)

    # ------- Backdrop -------
    def _init_backdrop(self):
        self._backdrop = start_backdrop(self.centralWidget())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self._backdrop is not None:
            self._backdrop.setGeometry(self.centralWidget().rect())
        self._position_toast_area()

    # ------- Input capture -------
    def on_email_changed(self):
        self.controller.set_email_content(self.email_edit.toPlainText())
        self._sync_generate_btn()

    def on_tone_changed(self, _index: int):
        self.controller.set_tone(self.tone_cmb.currentData() or "")

    # ------- UI Actions -------
    def show_settings(self):
        dlg = SettingsDialog(self, current_url=config.ENDPOINT_URL, current_timeout=config.TIMEOUT_S)
        if dlg.exec() == QDialog.Accepted:
            config.set_endpoint_url(dlg.url_edit.text())
            config.set_timeout(dlg.timeout_spin.value())
            logger.info("Settings updated: endpoint=%s timeout=%ss", config.ENDPOINT_URL, config.TIMEOUT_S)

    def on_generate_clicked(self):
        # None means the guard rejected the click (empty email or already pending)
        payload = self.controller.begin_submission()
        if payload is None:
            return
        self.run_reply_worker(payload)

    def _start_worker_thread(self):
        # One thread for the window's lifetime; requests are queued onto it by signal
        self._worker_thread = QThread(self)
        # Keep a strong reference so Python GC doesn't collect the worker
        self._worker = ReplyWorker()
        self._worker.moveToThread(self._worker_thread)
        self.replyRequested.connect(self._worker.run)
        self._worker.finished.connect(self.on_reply_ready)
        self._worker.failed.connect(self.on_reply_failed)
        self._worker_thread.finished.connect(self._worker.deleteLater)
        self._worker_thread.start()

    def run_reply_worker(self, payload: ReplyRequest):
        self.replyRequested.emit(payload)

    def on_reply_ready(self, body: Any):
        self.controller.complete(body)

    def on_reply_failed(self, error: Exception):
        self.controller.fail(error)

    def on_copy_clicked(self):
        if self.controller.copy_to_clipboard(QApplication.clipboard()):
            self.show_toast("Copied to clipboard", duration_ms=1500)

    # ---- Toast helpers ----
    def show_toast(self, text: str, duration_ms: int = 3000):
        # Only one toast at a time
        for t in list(self._toasts):
            t.hide()
            t.deleteLater()
        self._toasts.clear()
        while self._toast_layout.count():
            item = self._toast_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.deleteLater()

        t = Toast(text, duration_ms=duration_ms, parent=self._toast_area)
        t.closed.connect(self._remove_toast)
        self._toast_layout.addWidget(t, 0, Qt.AlignRight | Qt.AlignTop)
        self._toasts.append(t)
        t.show_with_fade()

    def _remove_toast(self, toast: Toast):
        if toast in self._toasts:
            self._toasts.remove(toast)
        for i in reversed(range(self._toast_layout.count())):
            item = self._toast_layout.itemAt(i)
            if item and item.widget() is toast:
                self._toast_layout.takeAt(i)
                break

    def _position_toast_area(self):
        if not hasattr(self, "_toast_area"):
            return
        right = 20
        top = 76  # below top bar
        width = 360
        x = max(0, self.width() - right - width)
        self._toast_area.setGeometry(x, top, width, max(60, self.height() - top - 20))

    # ---- Generate button processing visuals ----
    def _ensure_proc_container(self):
        if self._proc_container is not None:
            return
        cont = QWidget(self.generate_btn)
        lay = QHBoxLayout(cont)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(6)
        sp = Spinner(cont, diameter=16, line_width=2, color="#ffffff")
        lbl = QLabel("Generating...", cont)
        lbl.setStyleSheet("color: #ffffff; background: transparent;")
        lay.addWidget(sp)
        lay.addWidget(lbl)
        cont.adjustSize()
        btn_layout = QHBoxLayout(self.generate_btn)
        btn_layout.setContentsMargins(0, 0, 0, 0)
        btn_layout.setAlignment(Qt.AlignCenter)
        btn_layout.addWidget(cont, 0, Qt.AlignCenter)
        self._proc_container = cont
        self._spinner = sp

    def _set_processing(self, on: bool):
        self.generate_btn.setProperty("processing", on)
        self.generate_btn.style().unpolish(self.generate_btn)
        self.generate_btn.style().polish(self.generate_btn)
        if on:
            self.generate_btn.setText("")
            self._ensure_proc_container()
            self._spinner.start()
            self._proc_container.show()
        else:
            if self._spinner:
                self._spinner.stop()
            if self._proc_container:
                self._proc_container.hide()
            self.generate_btn.setText("Generate Reply")

    def _sync_generate_btn(self):
        self.generate_btn.setEnabled(self.controller.can_submit())

    # ---- Graceful shutdown on app close ----
    def closeEvent(self, event):
        # Requests cannot be cancelled; the thread exits once a running one returns
        if self._worker_thread.isRunning():
            self._worker_thread.quit()
            if not self._worker_thread.wait(int(config.TIMEOUT_S * 1000)):
                logger.warning("Reply request still running at shutdown")
                # Last resort so the thread is not destroyed while running
                self._worker_thread.terminate()
                self._worker_thread.wait(1000)
        if self._backdrop is not None:
            self._backdrop.stop()
        super().closeEvent(event)

    # ------- View Binding -------
    def refresh_view(self):
        c = self.controller
        self._set_processing(c.is_pending)
        self._sync_generate_btn()

        error = c.error or ""
        self.error_lbl.setText(error)
        self.error_lbl.setVisible(bool(error))

        reply = c.reply or ""
        self.reply_card.set_text(reply)
        self.reply_card.setVisible(bool(reply))


def main():
    setup_logging()
    app = QApplication(sys.argv)
    # Force a light theme regardless of OS dark mode
    QApplication.setStyle("Fusion")
    pal = QPalette()
    pal.setColor(QPalette.Window, QColor("#f0f0f0"))
    pal.setColor(QPalette.Base, QColor("#ffffff"))
    pal.setColor(QPalette.AlternateBase, QColor("#f0f0f0"))
    pal.setColor(QPalette.Button, QColor("#ffffff"))
    pal.setColor(QPalette.Text, QColor("#1f2937"))
    pal.setColor(QPalette.WindowText, QColor("#1f2937"))
    pal.setColor(QPalette.ButtonText, QColor("#1f2937"))
    app.setPalette(pal)
    win = MainWindow()
    win.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
