"""
Onboarding Flow

Five-step state machine that builds a Profile, optionally pre-filled from a
CV, and submits it for analysis:

    UPLOAD_OR_SKIP -> PERSONAL -> SKILLS_AND_TARGET -> PREFERENCES -> GOALS_AND_SUBMIT

Navigation is never gated by validation. The extraction and analysis calls are
single-flight: while one is in progress, another trigger of the same call is
ignored rather than queued.
"""

from enum import IntEnum
from pathlib import Path
from typing import Any, List, Optional

from careerpath.errors import AnalysisError, ExtractionError
from careerpath.gateways.analysis import AnalysisGateway
from careerpath.gateways.extraction import ExtractionGateway
from careerpath.models.analysis import CareerAnalysis
from careerpath.models.profile import (
    CAREER_PATHS,
    LEARNING_STYLES,
    TIME_COMMITMENTS,
    Profile,
    coerce_years_experience,
    merge_partial_profile,
)
from careerpath.utils.document_loader import encode_bytes, load_document, validate_document
from careerpath.utils.logger import get_logger


class OnboardingStep(IntEnum):
    UPLOAD_OR_SKIP = 0
    PERSONAL = 1
    SKILLS_AND_TARGET = 2
    PREFERENCES = 3
    GOALS_AND_SUBMIT = 4


FIRST_STEP = OnboardingStep.UPLOAD_OR_SKIP
LAST_STEP = OnboardingStep.GOALS_AND_SUBMIT


class OnboardingFlow:
    """Collects a Profile step by step and submits it for analysis."""

    def __init__(
        self,
        extraction_gateway: ExtractionGateway,
        analysis_gateway: AnalysisGateway,
        profile: Optional[Profile] = None,
        correlation_id: Optional[str] = None,
    ):
        """
        Args:
            extraction_gateway: Used by the upload step
            analysis_gateway: Used by submit
            profile: Starting profile (defaults to an empty Profile)
            correlation_id: Correlation ID for logging
        """
        self.extraction_gateway = extraction_gateway
        self.analysis_gateway = analysis_gateway
        self.profile = profile if profile is not None else Profile()
        self.step = FIRST_STEP
        self.submitted = False
        self.is_extracting = False
        self.is_submitting = False
        self.last_error: Optional[str] = None
        self.logger = get_logger(
            correlation_id=correlation_id,
            phase="onboarding",
            component="onboarding_flow",
        )

    @property
    def progress(self) -> List[bool]:
        """Completion markers for steps 1-4 (the upload step has none)."""
        return [self.step >= i for i in range(1, LAST_STEP + 1)]

    @property
    def is_busy(self) -> bool:
        return self.is_extracting or self.is_submitting

    # Navigation

    def _go_to(self, step: int) -> None:
        target = OnboardingStep(min(max(step, FIRST_STEP), LAST_STEP))
        if target != self.step:
            self.logger.debug(
                "Onboarding step changed", from_step=self.step.name, to_step=target.name
            )
        self.step = target

    def next(self) -> OnboardingStep:
        """Advance one step. No-op on the last step or while a call is in flight."""
        if not self.is_busy:
            self._go_to(self.step + 1)
        return self.step

    def back(self) -> OnboardingStep:
        """Go back one step, keeping everything entered. No-op on the first step."""
        if not self.is_busy:
            self._go_to(self.step - 1)
        return self.step

    def skip_upload(self) -> OnboardingStep:
        """Continue to manual entry without extracting anything."""
        if self.step == OnboardingStep.UPLOAD_OR_SKIP and not self.is_busy:
            self._go_to(OnboardingStep.PERSONAL)
        return self.step

    # CV upload

    async def upload_document(self, data: bytes, mime_type: str) -> Optional[Profile]:
        """
        Pre-fill the profile from a CV.

        Args:
            data: Raw document bytes
            mime_type: Document media type

        Returns:
            Updated profile, or None if the upload was ignored (not on the
            upload step, or an extraction is already running)

        Raises:
            ExtractionError: If the document is empty, not a PDF or image, or
                extraction failed. The profile is unchanged and the flow
                stays on the upload step.
        """
        if not self._can_extract():
            return None

        try:
            mime_type = validate_document(data, mime_type)
        except ExtractionError as e:
            self.last_error = str(e)
            raise

        return await self._extract(encode_bytes(data), mime_type)

    async def upload_file(self, file_path: Path | str) -> Optional[Profile]:
        """Read a CV from disk and pre-fill the profile from it.

        Raises:
            ExtractionError: If the file cannot be loaded or extraction failed
        """
        if not self._can_extract():
            return None

        try:
            document = load_document(file_path)
        except ExtractionError as e:
            self.last_error = str(e)
            raise

        return await self._extract(document.data_base64, document.mime_type)

    def _can_extract(self) -> bool:
        if self.step != OnboardingStep.UPLOAD_OR_SKIP:
            self.logger.warning("Upload ignored outside upload step", step=self.step.name)
            return False
        if self.is_extracting:
            self.logger.warning("Upload ignored, extraction already in progress")
            return False
        return True

    async def _extract(self, document_base64: str, mime_type: str) -> Optional[Profile]:
        if not self._can_extract():
            return None

        self.is_extracting = True
        self.last_error = None
        try:
            partial = await self.extraction_gateway.extract(document_base64, mime_type)
        except ExtractionError as e:
            self.last_error = str(e)
            self.logger.error("CV analysis failed", error=str(e))
            raise
        finally:
            self.is_extracting = False

        self.profile = merge_partial_profile(self.profile, partial)
        self._go_to(OnboardingStep.PERSONAL)
        self.logger.info("Profile pre-filled from CV", skills_count=len(self.profile.skills))
        return self.profile

    # Field edits (no external calls)

    def update_personal(
        self,
        name: Optional[str] = None,
        current_role: Optional[str] = None,
        years_experience: Any = None,
    ) -> None:
        """Set step-1 fields. Arguments left as None are not changed."""
        if name is not None:
            self.profile.name = name
        if current_role is not None:
            self.profile.current_role = current_role
        if years_experience is not None:
            self.set_years_experience(years_experience)

    def set_years_experience(self, raw: Any) -> int:
        """Set years of experience from raw input; invalid input becomes 0."""
        self.profile.years_experience = coerce_years_experience(raw)
        return self.profile.years_experience

    def set_target_role(self, target_role: str) -> None:
        self.profile.target_role = target_role

    def set_bio(self, bio: str) -> None:
        self.profile.bio = bio

    def add_skill(self, text: str) -> bool:
        """
        Append a skill.

        Args:
            text: Raw input; surrounding whitespace is trimmed

        Returns:
            True if a skill was added, False for blank input
        """
        skill = text.strip()
        if not skill:
            return False
        self.profile.skills = [*self.profile.skills, skill]
        return True

    def remove_skill(self, skill: str) -> None:
        """Remove every skill equal to ``skill``."""
        self.profile.skills = [s for s in self.profile.skills if s != skill]

    def toggle_learning_style(self, style: str) -> List[str]:
        """
        Select the style if absent, deselect it if present.

        Raises:
            ValueError: If style is not in LEARNING_STYLES
        """
        if style not in LEARNING_STYLES:
            raise ValueError(f"Unknown learning style: {style!r}")

        styles = self.profile.learning_styles
        if style in styles:
            self.profile.learning_styles = [s for s in styles if s != style]
        else:
            self.profile.learning_styles = [*styles, style]
        return self.profile.learning_styles

    def select_career_path(self, career_path: str) -> None:
        """Raises ValueError if career_path is not in CAREER_PATHS."""
        if career_path not in CAREER_PATHS:
            raise ValueError(f"Unknown career path: {career_path!r}")
        self.profile.career_path = career_path

    def select_time_commitment(self, time_commitment: str) -> None:
        """Raises ValueError if time_commitment is not in TIME_COMMITMENTS."""
        if time_commitment not in TIME_COMMITMENTS:
            raise ValueError(f"Unknown time commitment: {time_commitment!r}")
        self.profile.time_commitment = time_commitment

    # Submit

    async def submit(self) -> Optional[CareerAnalysis]:
        """
        Submit the profile for analysis.

        Returns:
            CareerAnalysis on success, or None if the submit was ignored (not
            on the last step, already submitted, or a submit is in flight)

        Raises:
            AnalysisError: If analysis failed. The flow stays on the last step
                with the profile intact, so submit can be called again.
        """
        if self.step != LAST_STEP or self.submitted:
            self.logger.warning("Submit ignored", step=self.step.name, submitted=self.submitted)
            return None
        if self.is_submitting:
            self.logger.warning("Submit ignored, analysis already in progress")
            return None

        self.is_submitting = True
        self.last_error = None
        try:
            analysis = await self.analysis_gateway.analyze(self.profile)
        except AnalysisError as e:
            self.last_error = str(e)
            self.logger.error("Analysis failed", error=str(e))
            raise
        finally:
            self.is_submitting = False

        self.submitted = True
        self.logger.info("Onboarding submitted", target_role=self.profile.target_role)
        return analysis
