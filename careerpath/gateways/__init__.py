"""Gateways to the hosted Gemini models: extraction, analysis and chat."""

from careerpath.gateways.analysis import AnalysisGateway
from careerpath.gateways.chat import ChatGateway, ChatSession, GeminiChatSession
from careerpath.gateways.extraction import ExtractionGateway

__all__ = [
    "AnalysisGateway",
    "ChatGateway",
    "ChatSession",
    "ExtractionGateway",
    "GeminiChatSession",
]
