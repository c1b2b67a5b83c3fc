from typing import Literal, Tuple
from pydantic import BaseModel

Tone = Literal["", "professional", "casual", "friendly"]

# (value, label) pairs in the order the tone picker shows them
TONE_CHOICES: Tuple[Tuple[str, str], ...] = (
    ("", "Select Tone (Optional)"),
    ("professional", "Professional"),
    ("casual", "Casual"),
    ("friendly", "Friendly"),
)
TONES = frozenset(value for value, _ in TONE_CHOICES)

class ReplyRequest(BaseModel):
    """JSON body posted to the reply endpoint (camelCase keys on the wire)."""
    emailContent: str
    tone: Tone = ""
