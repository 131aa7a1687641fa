"""
Unit tests for CareerAnalysis and ChatMessage models.
"""

import pytest
from pydantic import ValidationError

from careerpath.models.analysis import CareerAnalysis, SkillGap
from careerpath.models.chat import ChatMessage
from tests.factories import make_analysis_payload


class TestCareerAnalysis:
    """Test cases for CareerAnalysis model."""

    def test_parses_wire_format(self):
        analysis = CareerAnalysis.model_validate(make_analysis_payload(skill_gaps=6))

        assert len(analysis.skill_gaps) == 6
        assert len(analysis.roadmap) == 3
        assert analysis.recommended_resources == ["Resource 1", "Resource 2", "Resource 3"]
        assert analysis.skill_gaps[0].skill == "System Design"
        assert analysis.roadmap[0].duration == "1-3 months"

    def test_is_immutable(self):
        analysis = CareerAnalysis.model_validate(make_analysis_payload())

        with pytest.raises(ValidationError):
            analysis.executive_summary = "changed"

    def test_scores_and_importance_passed_through(self):
        """Test that out-of-range scores and unknown importance are kept as returned."""
        gap = SkillGap.model_validate(
            {
                "skill": "Go",
                "currentScore": 0,
                "targetScore": 12,
                "importance": "Critical",
                "recommendation": "Build a CLI",
            }
        )

        assert gap.current_score == 0
        assert gap.target_score == 12
        assert gap.importance == "Critical"

    @pytest.mark.parametrize("current, target, expected", [(4, 8, 4), (9, 7, 0), (5, 5, 0)])
    def test_gap_never_negative(self, current, target, expected):
        gap = SkillGap(
            skill="SQL",
            current_score=current,
            target_score=target,
            importance="High",
            recommendation="Practice",
        )

        assert gap.gap == expected


class TestChatMessage:
    """Test cases for ChatMessage model."""

    def test_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            ChatMessage(id="1", role="system", text="hi", timestamp=0)

    def test_is_immutable(self):
        message = ChatMessage(id="1", role="user", text="hi", timestamp=0)

        with pytest.raises(ValidationError):
            message.text = "changed"
