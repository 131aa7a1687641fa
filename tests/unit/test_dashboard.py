"""
Unit tests for dashboard rendering.
"""

import io
from datetime import datetime

import pytest
from rich.console import Console

from careerpath.dashboard import (
    format_time,
    render_dashboard,
    render_transcript,
    score_bar,
)
from careerpath.models.analysis import CareerAnalysis
from careerpath.models.chat import ChatMessage
from tests.factories import make_analysis_payload


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=160, color_system=None)


class TestScoreBar:
    """Test cases for the skill gap bar."""

    def test_cells(self):
        assert score_bar(4, 8).plain == "████▒▒▒▒··"

    def test_target_below_current(self):
        assert score_bar(7, 5).plain == "███████···"

    def test_out_of_range_clamped(self):
        assert score_bar(-2, 15).plain == "▒▒▒▒▒▒▒▒▒▒"


class TestRenderDashboard:
    """Test cases for the analysis dashboard."""

    def test_renders_every_section(self, console, jane_profile):
        # Arrange
        analysis = CareerAnalysis.model_validate(make_analysis_payload(skill_gaps=6))

        # Act
        render_dashboard(console, jane_profile, analysis)

        # Assert
        output = console.file.getvalue()
        assert "Jane" in output
        assert "Lead Dev" in output
        assert "Executive Summary" in output
        assert "Skill Gap Analysis" in output
        assert "System Design" in output
        assert "Roadmap" in output
        assert "Foundations" in output
        assert "Salary & Market Insights" in output
        assert "Resource 3" in output


class TestRenderTranscript:
    """Test cases for the chat transcript."""

    def test_roles_and_times(self, console):
        timestamp = int(datetime(2025, 1, 1, 9, 5).timestamp() * 1000)
        messages = [
            ChatMessage(id="init", role="model", text="Hi **Jane**!", timestamp=timestamp),
            ChatMessage(id="2", role="user", text="Hello", timestamp=timestamp),
        ]

        render_transcript(console, messages)

        output = console.file.getvalue()
        assert "Consultant" in output
        assert "You" in output
        assert "09:05" in output
        assert "Hello" in output

    def test_format_time(self):
        timestamp = int(datetime(2025, 3, 4, 17, 42).timestamp() * 1000)

        assert format_time(timestamp) == "17:42"
