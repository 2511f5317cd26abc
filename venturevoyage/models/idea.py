"""
Shared data models for user attributes and business ideas.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _unique(values: List[str]) -> List[str]:
    """Drop duplicates while keeping first-insertion order."""
    seen = set()
    unique = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique


def _toggle(values: List[str], value: str):
    if value in values:
        values.remove(value)
    else:
        values.append(value)


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Level(str, Enum):
    """Market demand and competition tiers."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class UserAttributes(BaseModel):
    """Quiz answers used to personalise idea generation."""

    skills: List[str] = Field(default_factory=list, description="Skills the user selected")
    personality_traits: List[str] = Field(default_factory=list, description="Personality traits the user selected")
    interests: List[str] = Field(default_factory=list, description="Interests the user selected")

    @field_validator("skills", "personality_traits", "interests")
    @classmethod
    def as_ordered_set(cls, values: List[str]) -> List[str]:
        return _unique(values)

    def toggle_skill(self, skill: str):
        _toggle(self.skills, skill)

    def toggle_personality_trait(self, trait: str):
        _toggle(self.personality_traits, trait)

    def toggle_interest(self, interest: str):
        _toggle(self.interests, interest)


class BusinessIdea(BaseModel):
    """Model representing a generated business idea."""

    id: str = Field(default_factory=new_id, description="Opaque identifier")
    title: str = Field(..., description="Business title")
    description: str = Field("", description="Two or three sentence summary")
    category: str = Field("", description="Tech, Service, Creative, etc.")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Easy, Medium or Hard")
    estimated_revenue: str = Field("", description="Estimated revenue range")
    time_to_launch: str = Field("", description="Time needed to launch")
    required_skills: List[str] = Field(default_factory=list, description="Skills needed to run the business")
    startup_cost: str = Field("", description="Estimated startup cost")
    profit_margin: str = Field("", description="Profit margin estimate")
    market_demand: Level = Field(Level.MEDIUM, description="High, Medium or Low")
    competition: Level = Field(Level.MEDIUM, description="High, Medium or Low")
    created_at: datetime = Field(default_factory=utc_now)
    user_id: str = ""
    personalized_notes: str = ""
    progress: int = Field(0, ge=0, le=100, description="Completion percentage")
    saved: bool = False
