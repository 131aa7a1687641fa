"""
Shared test fixtures.

The genai client is always a MagicMock: unit tests never reach the network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from careerpath.models.profile import Profile
from tests.factories import model_response


@pytest.fixture
def mock_client():
    """genai.Client stand-in with async generate_content and chat creation."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=model_response({}))
    return client


@pytest.fixture
def jane_profile() -> Profile:
    return Profile(
        name="Jane",
        current_role="Senior Dev",
        years_experience=6,
        target_role="Lead Dev",
        skills=["Python", "AWS"],
        bio="I want to lead a platform team.",
        career_path="Technical Expert",
        learning_styles=["Hands-on Projects"],
        time_commitment="Moderate (3-7h)",
    )
