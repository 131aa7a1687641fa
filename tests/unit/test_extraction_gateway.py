"""
Unit tests for ExtractionGateway.
"""

import base64

import pytest
from google.genai import types

from careerpath.errors import ExtractionError
from careerpath.gateways.extraction import ExtractionGateway
from tests.factories import model_response

PDF_B64 = base64.b64encode(b"%PDF-1.4 fake cv").decode("ascii")


@pytest.fixture
def gateway(mock_client):
    return ExtractionGateway(mock_client, model="test-flash", correlation_id="test")


class TestExtractionGateway:
    """Test cases for CV extraction."""

    def test_prompt_mentions_skill_cap(self, gateway):
        prompt = gateway.build_prompt()

        assert gateway.max_skills == 15
        assert "max 15" in prompt
        assert "targetRole" in prompt

    @pytest.mark.asyncio
    async def test_name_only_response(self, gateway, mock_client):
        """Test a response carrying only a name yields a partial with only a name."""
        # Arrange
        mock_client.aio.models.generate_content.return_value = model_response(
            {"name": "Jane Doe"}
        )

        # Act
        partial = await gateway.extract(PDF_B64, "application/pdf")

        # Assert
        assert partial.name == "Jane Doe"
        assert partial.current_role is None
        assert partial.skills is None
        assert partial.years_experience is None

    @pytest.mark.asyncio
    async def test_full_response(self, gateway, mock_client):
        mock_client.aio.models.generate_content.return_value = model_response(
            {
                "name": "Jane Doe",
                "currentRole": "Senior Dev",
                "yearsExperience": 6,
                "targetRole": "Lead Dev",
                "skills": ["Python", "AWS"],
                "bio": "Backend engineer.",
            }
        )

        partial = await gateway.extract(PDF_B64, "application/pdf")

        assert partial.current_role == "Senior Dev"
        assert partial.years_experience == 6
        assert partial.skills == ["Python", "AWS"]

    @pytest.mark.asyncio
    async def test_request_shape(self, gateway, mock_client):
        """Test the document goes inline with the prompt and a JSON response schema."""
        mock_client.aio.models.generate_content.return_value = model_response({})

        await gateway.extract(PDF_B64, "application/pdf")

        kwargs = mock_client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "test-flash"
        document, prompt = kwargs["contents"]
        assert document.inline_data.mime_type == "application/pdf"
        assert document.inline_data.data == b"%PDF-1.4 fake cv"
        assert "Analyze this CV" in prompt.text
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].response_schema.type == types.Type.OBJECT

    @pytest.mark.asyncio
    async def test_invalid_base64_rejected_before_call(self, gateway, mock_client):
        with pytest.raises(ExtractionError, match="base64"):
            await gateway.extract("not base64!!", "application/pdf")

        mock_client.aio.models.generate_content.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, mime_type, match",
        [
            (PDF_B64, "text/plain", "Unsupported document type"),
            (PDF_B64, "application/zip", "Unsupported document type"),
            ("", "application/pdf", "empty"),
        ],
    )
    async def test_unusable_document_rejected_before_call(
        self, gateway, mock_client, payload, mime_type, match
    ):
        with pytest.raises(ExtractionError, match=match):
            await gateway.extract(payload, mime_type)

        mock_client.aio.models.generate_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mime_parameters_stripped(self, gateway, mock_client):
        mock_client.aio.models.generate_content.return_value = model_response({})

        await gateway.extract(PDF_B64, "Application/PDF; name=cv.pdf")

        document = mock_client.aio.models.generate_content.await_args.kwargs["contents"][0]
        assert document.inline_data.mime_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_transport_failure(self, gateway, mock_client):
        mock_client.aio.models.generate_content.side_effect = RuntimeError("network down")

        with pytest.raises(ExtractionError, match="Failed to extract information from CV"):
            await gateway.extract(PDF_B64, "application/pdf")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   "])
    async def test_no_text(self, gateway, mock_client, text):
        mock_client.aio.models.generate_content.return_value = model_response(text)

        with pytest.raises(ExtractionError, match="no content"):
            await gateway.extract(PDF_B64, "application/pdf")

    @pytest.mark.asyncio
    async def test_invalid_json(self, gateway, mock_client):
        mock_client.aio.models.generate_content.return_value = model_response("{not json")

        with pytest.raises(ExtractionError, match="invalid JSON"):
            await gateway.extract(PDF_B64, "application/pdf")

    @pytest.mark.asyncio
    async def test_fenced_json_not_repaired(self, gateway, mock_client):
        mock_client.aio.models.generate_content.return_value = model_response(
            '```json\n{"name": "Jane Doe"}\n```'
        )

        with pytest.raises(ExtractionError):
            await gateway.extract(PDF_B64, "application/pdf")

    @pytest.mark.asyncio
    async def test_too_many_skills_rejected(self, gateway, mock_client):
        mock_client.aio.models.generate_content.return_value = model_response(
            {"skills": [f"Skill {i}" for i in range(16)]}
        )

        with pytest.raises(ExtractionError, match="at most 15"):
            await gateway.extract(PDF_B64, "application/pdf")

    @pytest.mark.asyncio
    async def test_wrong_type_rejected(self, gateway, mock_client):
        mock_client.aio.models.generate_content.return_value = model_response(
            {"yearsExperience": "six"}
        )

        with pytest.raises(ExtractionError, match="type mismatch"):
            await gateway.extract(PDF_B64, "application/pdf")
