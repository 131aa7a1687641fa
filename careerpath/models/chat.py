"""Chat transcript message model."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

ChatRole = Literal["user", "model"]


class ChatMessage(BaseModel):
    """A single transcript entry.

    Attributes:
        id: Unique within one transcript
        role: "user" or "model"
        text: Message text (markdown for model replies)
        timestamp: Epoch milliseconds, non-decreasing along the transcript
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: ChatRole
    text: str
    timestamp: int
