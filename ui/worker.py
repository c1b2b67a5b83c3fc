from typing import Any, Callable, Optional
from PySide6.QtCore import QObject, Signal, Slot
from replygen.client import generate_reply
from replygen.schema import ReplyRequest

class ReplyWorker(QObject):
    """Lives on the window's worker thread; each payload arrives through run()."""
    finished = Signal(object) # decoded response body
    failed = Signal(object)   # the exception, for logging only

    def __init__(self, send: Optional[Callable[[ReplyRequest], Any]] = None):
        super().__init__()
        self._send = send

    @Slot(object)
    def run(self, payload: ReplyRequest):
        send = self._send or generate_reply
        try:
            body = send(payload)
        except Exception as e:
            self.failed.emit(e)
            return
        self.finished.emit(body)
