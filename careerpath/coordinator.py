"""
Application Coordinator Module

Owns the application's view state and wires the gateways together: one genai
client is created at startup and injected into every gateway. Onboarding hands
a completed Profile to the analysis call; the resulting CareerAnalysis and the
consultant chat live here for the rest of the run. Nothing is persisted.
"""

import uuid
from enum import Enum
from typing import Optional

from google import genai

from careerpath.consultant_chat import ConsultantChat
from careerpath.errors import AnalysisError
from careerpath.gateways.analysis import AnalysisGateway
from careerpath.gateways.chat import ChatGateway
from careerpath.gateways.extraction import ExtractionGateway
from careerpath.models.analysis import CareerAnalysis
from careerpath.models.config import AppParams
from careerpath.models.profile import Profile
from careerpath.onboarding import OnboardingFlow
from careerpath.utils.llm_helpers import create_client
from careerpath.utils.logger import get_logger
from careerpath.utils.validator import ResponseValidator

ANALYSIS_FAILED_MESSAGE = (
    "Something went wrong while analyzing your profile. "
    "Please ensure you have a valid API Key configured."
)


class AppView(Enum):
    ONBOARDING = "ONBOARDING"
    DASHBOARD = "DASHBOARD"
    CHAT = "CHAT"


class CareerCoordinator:
    """
    Coordinates onboarding, the dashboard and the consultant chat.

    The dashboard and chat views only become reachable once an analysis has
    been received.
    """

    def __init__(
        self,
        extraction_gateway: ExtractionGateway,
        analysis_gateway: AnalysisGateway,
        chat_gateway: ChatGateway,
        correlation_id: Optional[str] = None,
    ):
        """
        Initialize coordinator.

        Args:
            extraction_gateway: CV extraction
            analysis_gateway: Career analysis
            chat_gateway: Consultant chat sessions
            correlation_id: Correlation ID for logging (auto-generated if None)
        """
        if correlation_id is None:
            correlation_id = str(uuid.uuid4())

        self.correlation_id = correlation_id
        self.chat_gateway = chat_gateway
        self.onboarding = OnboardingFlow(
            extraction_gateway, analysis_gateway, correlation_id=correlation_id
        )
        self.view = AppView.ONBOARDING
        self.profile: Optional[Profile] = None
        self.analysis: Optional[CareerAnalysis] = None
        self.chat: Optional[ConsultantChat] = None
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="coordinator",
            component="career_coordinator",
        )

    @classmethod
    def from_settings(
        cls,
        params: AppParams,
        api_key: str,
        client: Optional[genai.Client] = None,
        correlation_id: Optional[str] = None,
    ) -> "CareerCoordinator":
        """
        Build the coordinator and its gateways from settings.

        Args:
            params: Application parameters (model routing)
            api_key: Gemini API key
            client: Pre-built client; created from api_key when omitted
            correlation_id: Correlation ID for logging

        Returns:
            CareerCoordinator

        Raises:
            ConfigurationError: If the API key is empty
        """
        client = client or create_client(api_key)
        validator = ResponseValidator()
        return cls(
            extraction_gateway=ExtractionGateway(
                client,
                model=params.models.extraction,
                validator=validator,
                correlation_id=correlation_id,
            ),
            analysis_gateway=AnalysisGateway(
                client,
                model=params.models.analysis,
                validator=validator,
                correlation_id=correlation_id,
            ),
            chat_gateway=ChatGateway(
                client, model=params.models.chat, correlation_id=correlation_id
            ),
            correlation_id=correlation_id,
        )

    async def complete_onboarding(self) -> Optional[CareerAnalysis]:
        """
        Submit the onboarding profile and switch to the dashboard.

        Returns:
            CareerAnalysis, or None if the submit was ignored

        Raises:
            AnalysisError: If analysis failed; onboarding keeps its state
        """
        try:
            analysis = await self.onboarding.submit()
        except AnalysisError:
            self.logger.error("Analysis failed", step=self.onboarding.step.name)
            raise

        if analysis is None:
            return None

        self.profile = self.onboarding.profile.model_copy(deep=True)
        self.analysis = analysis
        self.chat = ConsultantChat(
            self.profile,
            session_factory=self.chat_gateway.create_session,
            correlation_id=self.correlation_id,
        )
        self.view = AppView.DASHBOARD
        self.logger.info(
            "Onboarding complete",
            skill_gap_count=len(analysis.skill_gaps),
            roadmap_steps=len(analysis.roadmap),
        )
        return analysis

    def show(self, view: AppView) -> AppView:
        """
        Switch views.

        Args:
            view: Requested view

        Returns:
            The current view after the switch

        Raises:
            ValueError: If the dashboard or chat is requested before an analysis
                exists, or onboarding is requested after it
        """
        if self.analysis is None and view is not AppView.ONBOARDING:
            raise ValueError(f"{view.value} is not available before onboarding completes")
        if self.analysis is not None and view is AppView.ONBOARDING:
            raise ValueError("Onboarding has already been completed")
        self.view = view
        self.logger.debug("View changed", view=view.value)
        return self.view
