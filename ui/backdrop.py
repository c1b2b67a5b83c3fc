import logging
from math import tau
from typing import Optional
import numpy as np
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QWidget

logger = logging.getLogger(__name__)

class BirdsBackdrop(QWidget):
    """Ambient flock of birds drifting behind the form. Purely decorative."""
    def __init__(self, parent: QWidget, quantity: int = 3, bird_size: float = 1.1,
                 wing_span: float = 24.0, color: str = "#bda7a7"):
        super().__init__(parent)
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self._count = max(1, int(quantity * 6))
        self._size = float(bird_size)
        self._span = float(wing_span)
        self._color = QColor(color)
        self._pos = np.zeros((0, 2))
        self._vel = np.zeros((0, 2))
        self._phase = np.zeros(0)
        self._timer = QTimer(self)
        self._timer.setInterval(33)
        self._timer.timeout.connect(self._tick)

    @property
    def bird_count(self) -> int:
        return len(self._pos)

    def seed(self, rng: Optional[np.random.Generator] = None):
        rng = rng or np.random.default_rng()
        w, h = max(200, self.width()), max(200, self.height())
        self._pos = rng.uniform((0.0, 0.0), (w, h), size=(self._count, 2))
        heading = rng.uniform(0.0, tau, self._count)
        speed = rng.uniform(0.4, 1.2, self._count)
        self._vel = np.stack([np.cos(heading) * speed, np.sin(heading) * speed], axis=1)
        self._phase = rng.uniform(0.0, tau, self._count)

    def start(self):
        if not self.bird_count:
            raise RuntimeError("Backdrop started before seed()")
        self.lower()
        self.show()
        self._timer.start()

    def stop(self):
        self._timer.stop()

    def _tick(self):
        w, h = self.width(), self.height()
        if w <= 0 or h <= 0:
            return
        # Loose cohesion toward the flock centre, speed kept within bounds
        centre = self._pos.mean(axis=0)
        self._vel += (centre - self._pos) * 0.0004
        speed = np.linalg.norm(self._vel, axis=1, keepdims=True)
        self._vel = self._vel / np.maximum(speed, 1e-6) * np.clip(speed, 0.4, 1.2)
        self._pos = np.mod(self._pos + self._vel, (w, h))
        self._phase = (self._phase + 0.25) % tau
        self.update()

    def paintEvent(self, event):
        p = QPainter(self)
        try:
            p.setRenderHint(QPainter.Antialiasing, True)
            pen = QPen(self._color)
            pen.setWidthF(1.5 * self._size)
            pen.setCapStyle(Qt.RoundCap)
            p.setPen(pen)
            half = self._span * self._size / 4.0
            for (x, y), phase in zip(self._pos, self._phase):
                flap = float(np.sin(phase)) * half * 0.6
                path = QPainterPath()
                path.moveTo(float(x) - half, float(y) - flap)
                path.lineTo(float(x), float(y))
                path.lineTo(float(x) + half, float(y) - flap)
                p.drawPath(path)
        finally:
            p.end()


def start_backdrop(mount: Optional[QWidget]) -> Optional[BirdsBackdrop]:
    """Best effort: failures are logged and the window carries on without the effect."""
    if mount is None:
        return None
    try:
        backdrop = BirdsBackdrop(mount)
        backdrop.setGeometry(mount.rect())
        backdrop.seed()
        backdrop.start()
    except Exception:
        logger.warning("Failed to start background animation", exc_info=True)
        return None
    return backdrop
