"""
Consultant Chat

Transcript controller for the follow-up chat. User turns are appended
immediately, the model's reply (or a fixed apology) once the call returns.
Only one turn is in flight at a time.
"""

import time
from typing import Callable, List, Optional

from careerpath.gateways.chat import ChatSession
from careerpath.models.chat import ChatMessage, ChatRole
from careerpath.models.profile import Profile
from careerpath.utils.logger import get_logger
from careerpath.utils.prompt_loader import PromptLoader, get_default_loader

GREETING_ID = "init"
CONNECTION_TROUBLE_MESSAGE = (
    "I'm having trouble connecting right now. Please try again."
)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConsultantChat:
    """Chat transcript for one profile, backed by a replaceable ChatSession."""

    def __init__(
        self,
        profile: Profile,
        session_factory: Callable[[Profile], ChatSession],
        clock: Callable[[], int] = _now_ms,
        prompt_loader: Optional[PromptLoader] = None,
        correlation_id: Optional[str] = None,
    ):
        """
        Args:
            profile: Completed profile the chat is grounded in
            session_factory: Creates a fresh session, e.g. ChatGateway.create_session
            clock: Millisecond clock for message timestamps
            prompt_loader: Used for the greeting text
            correlation_id: Correlation ID for logging
        """
        self.profile = profile
        self.session_factory = session_factory
        self.clock = clock
        self.prompt_loader = prompt_loader or get_default_loader()
        self.is_typing = False
        self._session: Optional[ChatSession] = None
        self._generation = 0
        self._ids: set[str] = set()
        self._messages: List[ChatMessage] = []
        self.logger = get_logger(
            correlation_id=correlation_id, phase="chat", component="consultant_chat"
        )

        greeting = self.prompt_loader.render(
            "chat/greeting.j2", correlation_id=correlation_id, profile=profile
        ).strip()
        self._append(
            ChatMessage(
                id=GREETING_ID, role="model", text=greeting, timestamp=self.clock()
            )
        )

    @property
    def messages(self) -> List[ChatMessage]:
        """Copy of the transcript, oldest first."""
        return list(self._messages)

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def _append(self, message: ChatMessage) -> None:
        self._ids.add(message.id)
        self._messages.append(message)

    def _timestamp(self) -> int:
        # Non-decreasing even if the clock steps backwards.
        return max(self.clock(), self._messages[-1].timestamp)

    def _unique_id(self, base: str) -> str:
        candidate = base
        suffix = 1
        while candidate in self._ids:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _make_message(self, role: ChatRole, text: str, offset: int = 0) -> ChatMessage:
        timestamp = self._timestamp()
        return ChatMessage(
            id=self._unique_id(str(timestamp + offset)),
            role=role,
            text=text,
            timestamp=timestamp,
        )

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send a user turn.

        Args:
            text: User input

        Returns:
            The reply appended to the transcript (model answer or apology), or
            None if the turn was ignored because the input was blank or a reply
            is still pending
        """
        if not text.strip():
            return None
        if self.is_typing:
            self.logger.warning("Chat turn ignored, reply still pending")
            return None

        self._append(self._make_message("user", text))
        self.is_typing = True
        generation = self._generation

        try:
            if self._session is None:
                self._session = self.session_factory(self.profile)
            reply_text = await self._session.send(text)
        except Exception as e:
            # Any failure ends up as the apology in the transcript.
            self.logger.error(
                "Chat turn failed", error=str(e), error_type=type(e).__name__
            )
            reply = self._make_message("model", CONNECTION_TROUBLE_MESSAGE, offset=1)
        else:
            reply = self._make_message("model", reply_text, offset=1)
        finally:
            if generation == self._generation:
                self.is_typing = False

        if generation != self._generation:
            # Transcript was reset while this turn was pending.
            self.logger.info("Discarding reply from before reset")
            return None

        self._append(reply)
        return reply

    def reset(self) -> None:
        """Drop everything but the greeting and start over with a fresh session."""
        self._messages = self._messages[:1]
        self._ids = {self._messages[0].id}
        self._session = None
        self._generation += 1
        self.is_typing = False
        self.logger.info("Chat reset", generation=self._generation)
