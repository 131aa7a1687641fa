"""
Career Analysis Data Models

Structured output of the analysis call. Instances are immutable once received.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SkillGap(BaseModel):
    """Gap between current and target proficiency for one skill.

    Scores are meant to be on a 1-10 scale and importance one of High, Medium,
    Low, but both are kept as the model returned them.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    skill: str
    current_score: int = Field(alias="currentScore")
    target_score: int = Field(alias="targetScore")
    importance: str
    recommendation: str

    @property
    def gap(self) -> int:
        """Points still to close (never negative)."""
        return max(self.target_score - self.current_score, 0)


class RoadmapStep(BaseModel):
    """One phase of the career roadmap."""

    model_config = ConfigDict(frozen=True)

    phase: str
    title: str
    description: str
    duration: str


class CareerAnalysis(BaseModel):
    """Career growth plan for a submitted profile."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    executive_summary: str = Field(alias="executiveSummary")
    skill_gaps: List[SkillGap] = Field(alias="skillGaps")
    roadmap: List[RoadmapStep]
    salary_insights: str = Field(alias="salaryInsights")
    recommended_resources: List[str] = Field(alias="recommendedResources")
