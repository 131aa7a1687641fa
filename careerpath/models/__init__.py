"""Data models for profiles, career analyses, chat messages and settings."""

from careerpath.models.analysis import CareerAnalysis, RoadmapStep, SkillGap
from careerpath.models.chat import ChatMessage
from careerpath.models.profile import (
    CAREER_PATHS,
    LEARNING_STYLES,
    TIME_COMMITMENTS,
    PartialProfile,
    Profile,
    merge_partial_profile,
)

__all__ = [
    "CAREER_PATHS",
    "LEARNING_STYLES",
    "TIME_COMMITMENTS",
    "CareerAnalysis",
    "ChatMessage",
    "PartialProfile",
    "Profile",
    "RoadmapStep",
    "SkillGap",
    "merge_partial_profile",
]
