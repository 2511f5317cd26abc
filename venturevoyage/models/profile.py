from datetime import datetime
from pydantic import BaseModel, Field
from typing import List

from venturevoyage.models.idea import utc_now


class UserProfile(BaseModel):
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    skills: List[str] = Field(default_factory=list)
    personality: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    subscription_tier: str = "free"
