import logging
from typing import Any, Callable, List, Optional, Protocol
from .client import normalize_reply
from .schema import ReplyRequest, TONES
from .state import Draft, RequestState, Idle, Pending, Succeeded, Failed, initial_draft

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to generate email reply. Please try again"

class Clipboard(Protocol):
    def setText(self, text: str) -> None: ...

class InvalidTransitionError(RuntimeError):
    """Raised when a request outcome arrives while no request is pending."""

Listener = Callable[["ReplyController"], None]

class ReplyController:
    """
    Owns the draft and the lifecycle of the single reply request.
    - Input: set_email_content / set_tone (always allowed, even while pending)
    - Submission: begin_submission -> complete | fail, or submit() for the whole round trip
    - Result: reply / copy_to_clipboard
    """
    def __init__(self):
        self.draft: Draft = initial_draft()
        self.state: RequestState = Idle()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _transition(self, state: RequestState):
        self.state = state
        for listener in list(self._listeners):
            listener(self)

    # ---- Input capture ----
    def set_email_content(self, text: str):
        self.draft["email_content"] = text

    def set_tone(self, value: str):
        if value not in TONES:
            raise ValueError(f"Unknown tone: {value!r}")
        self.draft["tone"] = value

    # ---- Read-only views ----
    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, Pending)

    @property
    def reply(self) -> Optional[str]:
        return self.state.reply if isinstance(self.state, Succeeded) else None

    @property
    def error(self) -> Optional[str]:
        return self.state.message if isinstance(self.state, Failed) else None

    def can_submit(self) -> bool:
        return bool(self.draft["email_content"]) and not self.is_pending

    # ---- Submission flow ----
    def begin_submission(self) -> Optional[ReplyRequest]:
        """Enter Pending and return the payload to send, or None if the guard rejects."""
        if not self.can_submit():
            return None
        payload = ReplyRequest(emailContent=self.draft["email_content"], tone=self.draft["tone"])
        logger.info(
            "Requesting reply (tone=%s, %d chars)",
            payload.tone or "unset",
            len(payload.emailContent),
        )
        # Entering Pending drops any previous reply or error message
        self._transition(Pending())
        return payload

    def complete(self, body: Any):
        if not self.is_pending:
            raise InvalidTransitionError(f"complete() while {self.state.kind}")
        try:
            reply = normalize_reply(body)
        except (TypeError, ValueError) as e:
            self.fail(e)
            return
        logger.info("Reply received (%d chars)", len(reply))
        self._transition(Succeeded(reply=reply))

    def fail(self, error: BaseException):
        if not self.is_pending:
            raise InvalidTransitionError(f"fail() while {self.state.kind}")
        # Detail goes to the log only; the UI always shows the same message
        logger.error("Reply generation failed: %s", error, exc_info=error)
        self._transition(Failed(message=FAILURE_MESSAGE))

    def submit(self, send: Callable[[ReplyRequest], Any]) -> bool:
        """Run one request end to end with the given transport. Returns False if rejected."""
        payload = self.begin_submission()
        if payload is None:
            return False
        try:
            body = send(payload)
        except Exception as e:
            self.fail(e)
            return True
        self.complete(body)
        return True

    # ---- Result presentation ----
    def copy_to_clipboard(self, clipboard: Clipboard) -> bool:
        reply = self.reply
        if not reply:
            return False
        clipboard.setText(reply)
        return True
