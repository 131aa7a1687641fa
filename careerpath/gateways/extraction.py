"""
Extraction Gateway
Turns an uploaded CV into a PartialProfile using a Gemini model.
"""

import base64
import binascii
from typing import Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from careerpath.errors import ExtractionError
from careerpath.models.profile import PartialProfile
from careerpath.utils.document_loader import validate_document
from careerpath.utils.llm_helpers import (
    call_model,
    parse_structured_response,
    to_genai_schema,
)
from careerpath.utils.logger import get_logger
from careerpath.utils.prompt_loader import PromptLoader, get_default_loader
from careerpath.utils.validator import PARTIAL_PROFILE_SCHEMA, ResponseValidator

DEFAULT_EXTRACTION_MODEL = "gemini-2.5-flash"


class ExtractionGateway:
    """Best-effort structured extraction of profile fields from a document."""

    def __init__(
        self,
        client: genai.Client,
        model: str = DEFAULT_EXTRACTION_MODEL,
        validator: Optional[ResponseValidator] = None,
        prompt_loader: Optional[PromptLoader] = None,
        correlation_id: Optional[str] = None,
    ):
        """
        Initialize extraction gateway.

        Args:
            client: Shared genai client
            model: Model used for extraction
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
            phase="onboarding",
            component="extraction_gateway",
        )

        schema = self.validator.load_schema(PARTIAL_PROFILE_SCHEMA)
        self.response_schema = to_genai_schema(schema)
        self.max_skills = schema["properties"]["skills"]["maxItems"]

    def build_prompt(self) -> str:
        """Render the extraction instructions."""
        return self.prompt_loader.render(
            "extraction/cv_profile.j2",
            correlation_id=self.correlation_id,
            max_skills=self.max_skills,
        )

    async def extract(self, document_base64: str, mime_type: str) -> PartialProfile:
        """
        Extract a partial profile from a CV.

        Args:
            document_base64: Document bytes, base64-encoded
            mime_type: Declared media type of the document

        Returns:
            PartialProfile with whatever fields the model returned

        Raises:
            ExtractionError: If the payload is not valid base64, is empty or is
                not a PDF or image, the call fails, no text comes back, or the
                text is not schema-conforming JSON
        """
        try:
            data = base64.b64decode(document_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            self.logger.error("Document payload is not valid base64", error=str(e))
            raise ExtractionError("Document payload is not valid base64") from e

        mime_type = validate_document(data, mime_type)

        contents = [
            types.Part.from_bytes(data=data, mime_type=mime_type),
            types.Part.from_text(text=self.build_prompt()),
        ]

        self.logger.info(
            "Extracting profile from document",
            mime_type=mime_type,
            size_bytes=len(data),
        )

        try:
            response_text = await call_model(
                self.client,
                model=self.model,
                contents=contents,
                response_schema=self.response_schema,
                correlation_id=self.correlation_id,
            )
        except Exception as e:
            raise ExtractionError(
                "Failed to extract information from CV"
            ) from e

        payload = parse_structured_response(
            response_text,
            PARTIAL_PROFILE_SCHEMA,
            self.validator,
            ExtractionError,
            correlation_id=self.correlation_id,
        )

        try:
            partial = PartialProfile.model_validate(payload)
        except ValidationError as e:
            raise ExtractionError(f"Extracted profile is malformed: {e}") from e

        self.logger.info(
            "Profile extracted",
            fields=sorted(payload.keys()),
            skills_count=len(partial.skills or []),
        )
        return partial
