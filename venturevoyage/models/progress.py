"""
Models for the progress and timeline tracker.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from venturevoyage.models.idea import new_id, utc_now


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class DailyGoal(BaseModel):
    """A dated task the user works on for a business idea."""

    id: str = Field(default_factory=new_id)
    business_idea_id: str
    title: str
    description: str = ""
    due_date: datetime
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    created_at: datetime = Field(default_factory=utc_now)
    user_id: str = ""


class Milestone(BaseModel):
    """An ordered checkpoint on the launch timeline of a business idea."""

    id: str = Field(default_factory=new_id)
    business_idea_id: str
    title: str
    description: str = ""
    due_date: datetime
    completed: bool = False
    order: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    user_id: str = ""
