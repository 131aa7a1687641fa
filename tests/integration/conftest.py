"""
Integration Test Configuration

Integration tests call the live Gemini API. They are skipped when no API key
is configured, and slow tests are skipped in CI (CI=true).
"""

import os

import pytest

from careerpath.utils.credential_manager import API_KEY_ENV_VARS


@pytest.fixture
def is_ci_environment() -> bool:
    """
    Detect if tests are running in CI environment.

    Returns:
        True if CI environment variable is set to 'true'
    """
    return os.getenv("CI", "").lower() == "true"


@pytest.fixture(autouse=True)
def skip_slow_tests_in_ci(request, is_ci_environment):
    """
    Automatically skip slow integration tests when running in CI.

    Args:
        request: pytest request fixture
        is_ci_environment: Fixture indicating CI environment
    """
    if is_ci_environment and request.node.get_closest_marker("slow"):
        pytest.skip("Skipping slow test in CI environment")


@pytest.fixture
def api_key() -> str:
    """Live Gemini API key, or skip the test when none is configured."""
    for key in API_KEY_ENV_VARS:
        value = os.getenv(key, "").strip()
        if value:
            return value
    pytest.skip("No Gemini API key configured")
