"""
User Profile Data Models

Profile is the career data collected during onboarding. PartialProfile is the
subset of it a CV extraction can produce; merge_partial_profile folds one into
the other.
"""

import math
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


CAREER_PATHS = ("Technical Expert", "Management", "Entrepreneurial")

LEARNING_STYLES = (
    "Video Courses",
    "Reading/Books",
    "Hands-on Projects",
    "Mentorship",
)

TIME_COMMITMENTS = ("Casual (< 3h)", "Moderate (3-7h)", "Intensive (7+h)")

DEFAULT_CAREER_PATH = "Technical Expert"
DEFAULT_LEARNING_STYLES = ["Hands-on Projects"]
DEFAULT_TIME_COMMITMENT = "Moderate (3-7h)"

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def coerce_years_experience(value: Any) -> int:
    """Coerce raw form input into a non-negative year count.

    Strings are read like a form's number input: the leading integer is used
    ("7 years" -> 7, "3.5" -> 3) and anything unparseable becomes 0. Negative
    values also become 0.

    Args:
        value: Raw input (str, int, float or None)

    Returns:
        Non-negative integer
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        years = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        years = int(match.group())
    else:
        return 0

    return max(years, 0)


class Profile(BaseModel):
    """Career profile built up by the onboarding flow.

    Attributes:
        name: Full name
        current_role: Current job title
        years_experience: Years of professional experience (coerced, >= 0)
        target_role: Role the user wants to grow into
        skills: Skills in display order, duplicates allowed
        bio: Goals / professional summary
        career_path: One of CAREER_PATHS
        learning_styles: Subset of LEARNING_STYLES, in selection order
        time_commitment: One of TIME_COMMITMENTS
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    name: str = ""
    current_role: str = Field(default="", alias="currentRole")
    years_experience: int = Field(default=0, alias="yearsExperience")
    target_role: str = Field(default="", alias="targetRole")
    skills: List[str] = Field(default_factory=list)
    bio: str = ""
    career_path: str = Field(default=DEFAULT_CAREER_PATH, alias="careerPath")
    learning_styles: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LEARNING_STYLES),
        alias="learningStyles",
    )
    time_commitment: str = Field(
        default=DEFAULT_TIME_COMMITMENT, alias="timeCommitment"
    )

    @field_validator("years_experience", mode="before")
    @classmethod
    def validate_years_experience(cls, v: Any) -> int:
        """Invalid numeric input coerces to 0."""
        return coerce_years_experience(v)

    @field_validator("career_path")
    @classmethod
    def validate_career_path(cls, v: str) -> str:
        if v not in CAREER_PATHS:
            raise ValueError(
                f"Invalid career path: {v!r}. Must be one of {CAREER_PATHS}"
            )
        return v

    @field_validator("learning_styles")
    @classmethod
    def validate_learning_styles(cls, v: List[str]) -> List[str]:
        unknown = [style for style in v if style not in LEARNING_STYLES]
        if unknown:
            raise ValueError(
                f"Invalid learning style(s): {unknown}. Must be drawn from {LEARNING_STYLES}"
            )
        return v

    @field_validator("time_commitment")
    @classmethod
    def validate_time_commitment(cls, v: str) -> str:
        if v not in TIME_COMMITMENTS:
            raise ValueError(
                f"Invalid time commitment: {v!r}. Must be one of {TIME_COMMITMENTS}"
            )
        return v


class PartialProfile(BaseModel):
    """Fields a CV extraction may return. None means "not supplied"."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    current_role: Optional[str] = Field(default=None, alias="currentRole")
    years_experience: Optional[int] = Field(default=None, alias="yearsExperience")
    target_role: Optional[str] = Field(default=None, alias="targetRole")
    skills: Optional[List[str]] = None
    bio: Optional[str] = None


def merge_partial_profile(profile: Profile, partial: PartialProfile) -> Profile:
    """
    Merge extracted data into a profile.

    Supplied fields overwrite the profile's value, absent fields leave it
    untouched. Skills are the exception: they replace the profile's list only
    when the extraction returned a non-empty list. Preference fields are never
    touched since extraction does not produce them.

    Args:
        profile: Profile being built by onboarding (not modified)
        partial: Extraction result

    Returns:
        New Profile with the merge applied
    """
    updates: dict[str, Any] = {}

    if partial.name is not None:
        updates["name"] = partial.name
    if partial.current_role is not None:
        updates["current_role"] = partial.current_role
    if partial.years_experience is not None:
        updates["years_experience"] = coerce_years_experience(
            partial.years_experience
        )
    if partial.target_role is not None:
        updates["target_role"] = partial.target_role
    if partial.bio is not None:
        updates["bio"] = partial.bio
    if partial.skills:
        updates["skills"] = list(partial.skills)

    return profile.model_copy(update=updates, deep=True)
