"""
Analysis Gateway
Sends a completed profile to Gemini and returns a structured career analysis.
"""

from typing import Optional

from google import genai
from pydantic import ValidationError

from careerpath.errors import AnalysisError
from careerpath.models.analysis import CareerAnalysis
from careerpath.models.profile import Profile
from careerpath.utils.llm_helpers import (
    call_model,
    parse_structured_response,
    to_genai_schema,
)
from careerpath.utils.logger import get_logger
from careerpath.utils.prompt_loader import PromptLoader, get_default_loader
from careerpath.utils.validator import CAREER_ANALYSIS_SCHEMA, ResponseValidator

DEFAULT_ANALYSIS_MODEL = "gemini-3-pro-preview"

# Requested in the prompt only; the roadmap length is not enforced on parse.
ROADMAP_STEPS = (3, 4)


class AnalysisGateway:
    """Produces a CareerAnalysis for a profile. One call per submit, no retries."""

    def __init__(
        self,
        client: genai.Client,
        model: str = DEFAULT_ANALYSIS_MODEL,
        validator: Optional[ResponseValidator] = None,
        prompt_loader: Optional[PromptLoader] = None,
        correlation_id: Optional[str] = None,
    ):
        """
        Initialize analysis gateway.

        Args:
            client: Shared genai client
            model: Model used for analysis
            validator: Response validator (defaults to bundled schemas)
            prompt_loader: Prompt loader (defaults to bundled templates)
            correlation_id: Correlation ID for logging
        """
        self.client = client
        self.model = model
        self.validator = validator or ResponseValidator()
        self.prompt_loader = prompt_loader or get_default_loader()
        self.correlation_id = correlation_id
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="analysis",
            component="analysis_gateway",
        )

        schema = self.validator.load_schema(CAREER_ANALYSIS_SCHEMA)
        self.response_schema = to_genai_schema(schema)
        skill_gaps = schema["properties"]["skillGaps"]
        resources = schema["properties"]["recommendedResources"]
        self.skill_gap_range = (skill_gaps["minItems"], skill_gaps["maxItems"])
        self.resource_count = resources["minItems"]

    def build_prompt(self, profile: Profile) -> str:
        """
        Render the analysis prompt with every profile field.

        Args:
            profile: Completed profile

        Returns:
            Prompt text
        """
        return self.prompt_loader.render(
            "analysis/career_plan.j2",
            correlation_id=self.correlation_id,
            profile=profile,
            min_skill_gaps=self.skill_gap_range[0],
            max_skill_gaps=self.skill_gap_range[1],
            min_roadmap_steps=ROADMAP_STEPS[0],
            max_roadmap_steps=ROADMAP_STEPS[1],
            resource_count=self.resource_count,
        )

    async def analyze(self, profile: Profile) -> CareerAnalysis:
        """
        Request a career analysis.

        Args:
            profile: Completed profile

        Returns:
            CareerAnalysis with 5-6 skill gaps and exactly 3 resources

        Raises:
            AnalysisError: If the call fails, no text comes back, the text is
                not JSON, or the result breaks the response contract
        """
        prompt = self.build_prompt(profile)
        self.logger.info(
            "Requesting career analysis",
            target_role=profile.target_role,
            skills_count=len(profile.skills),
            prompt_length=len(prompt),
        )

        try:
            response_text = await call_model(
                self.client,
                model=self.model,
                contents=prompt,
                response_schema=self.response_schema,
                correlation_id=self.correlation_id,
            )
        except Exception as e:
            raise AnalysisError("Failed to generate analysis") from e

        payload = parse_structured_response(
            response_text,
            CAREER_ANALYSIS_SCHEMA,
            self.validator,
            AnalysisError,
            correlation_id=self.correlation_id,
        )

        try:
            analysis = CareerAnalysis.model_validate(payload)
        except ValidationError as e:
            raise AnalysisError(f"Career analysis is malformed: {e}") from e

        self.logger.info(
            "Career analysis received",
            skill_gap_count=len(analysis.skill_gaps),
            roadmap_steps=len(analysis.roadmap),
            resource_count=len(analysis.recommended_resources),
        )
        return analysis
