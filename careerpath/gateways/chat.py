"""
Chat Gateway

Creates stateful consultant chat sessions grounded in a profile. A session
keeps its own history, so callers only send the new turn.
"""

from typing import Any, Optional, Protocol

from google import genai
from google.genai import types

from careerpath.errors import ChatTransportError
from careerpath.models.profile import Profile
from careerpath.utils.logger import get_logger
from careerpath.utils.prompt_loader import PromptLoader, get_default_loader

DEFAULT_CHAT_MODEL = "gemini-3-pro-preview"


class ChatSession(Protocol):
    """A conversation that remembers prior turns."""

    async def send(self, turn: str) -> str:
        """Send one user turn and return the model's reply.

        Raises:
            ChatTransportError: If no reply could be obtained
        """
        ...


class GeminiChatSession:
    """ChatSession backed by a google-genai async chat."""

    def __init__(self, chat: Any, correlation_id: Optional[str] = None):
        """
        Args:
            chat: Object returned by client.aio.chats.create()
            correlation_id: Correlation ID for logging
        """
        self._chat = chat
        self.turns_sent = 0
        self.logger = get_logger(
            correlation_id=correlation_id, phase="chat", component="chat_session"
        )

    async def send(self, turn: str) -> str:
        self.turns_sent += 1
        self.logger.debug("Sending chat turn", turn=self.turns_sent, length=len(turn))

        try:
            response = await self._chat.send_message(turn)
        except Exception as e:
            self.logger.error(
                "Chat turn failed",
                turn=self.turns_sent,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ChatTransportError(f"Chat turn failed: {e}") from e

        text = response.text
        if not text or not text.strip():
            self.logger.warning("Chat turn returned no text", turn=self.turns_sent)
            raise ChatTransportError("Model returned an empty reply")

        return text


class ChatGateway:
    """Factory for consultant chat sessions."""

    def __init__(
        self,
        client: genai.Client,
        model: str = DEFAULT_CHAT_MODEL,
        prompt_loader: Optional[PromptLoader] = None,
        correlation_id: Optional[str] = None,
    ):
        self.client = client
        self.model = model
        self.prompt_loader = prompt_loader or get_default_loader()
        self.correlation_id = correlation_id
        self.logger = get_logger(
            correlation_id=correlation_id, phase="chat", component="chat_gateway"
        )

    def build_system_instruction(self, profile: Profile) -> str:
        """Render the consultant persona grounded in the profile."""
        return self.prompt_loader.get_system_prompt(
            "consultant",
            correlation_id=self.correlation_id,
            profile=profile,
        )

    def create_session(self, profile: Profile) -> ChatSession:
        """
        Start a fresh chat session. No server-side context is shared with
        earlier sessions.

        Args:
            profile: Completed profile used as grounding

        Returns:
            New ChatSession
        """
        chat = self.client.aio.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(
                system_instruction=self.build_system_instruction(profile),
            ),
        )
        self.logger.info("Chat session created", model=self.model)
        return GeminiChatSession(chat, correlation_id=self.correlation_id)
