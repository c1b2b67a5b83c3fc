from dataclasses import dataclass
from typing import TypedDict, Union, Literal

class Draft(TypedDict):
    """User input waiting to be submitted.
    - email_content: the email to reply to (never trimmed)
    - tone: "" (unset) | "professional" | "casual" | "friendly"
    """
    email_content: str
    tone: str

def initial_draft() -> Draft:
    return Draft(email_content="", tone="")

# Request lifecycle: exactly one of these is active at a time
@dataclass(frozen=True)
class Idle:
    kind: Literal["idle"] = "idle"

@dataclass(frozen=True)
class Pending:
    kind: Literal["pending"] = "pending"

@dataclass(frozen=True)
class Succeeded:
    reply: str
    kind: Literal["succeeded"] = "succeeded"

@dataclass(frozen=True)
class Failed:
    message: str
    kind: Literal["failed"] = "failed"

RequestState = Union[Idle, Pending, Succeeded, Failed]
