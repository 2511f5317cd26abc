"""
Progress bookkeeping: launch timeline (goals and milestones) and onboarding.
"""

from datetime import datetime, timezone
from typing import List, Optional

from venturevoyage.models.progress import DailyGoal, Milestone
from venturevoyage.utils.constants import ONBOARDING_SCREENS_COUNT, UPCOMING_GOALS_LIMIT, SettingsKeys
from venturevoyage.utils.logger import logger
from venturevoyage.utils.settings_store import SettingsStore


class ProgressTracker:
    """Tracks daily goals and milestones for the user's business ideas."""

    def __init__(self, settings: Optional[SettingsStore] = None):
        """
        Initialize the tracker.

        Args:
            settings: Optional store used by save() and load()
        """
        self.settings = settings
        self.daily_goals: List[DailyGoal] = []
        self.milestones: List[Milestone] = []

    def add_goal(self, goal: DailyGoal):
        self.daily_goals.append(goal)

    def add_milestone(self, milestone: Milestone):
        self.milestones.append(milestone)

    def toggle_goal_completion(self, goal_id: str) -> Optional[DailyGoal]:
        for goal in self.daily_goals:
            if goal.id == goal_id:
                goal.completed = not goal.completed
                return goal
        logger.warning(f"No daily goal with id {goal_id}")
        return None

    def toggle_milestone_completion(self, milestone_id: str) -> Optional[Milestone]:
        for milestone in self.milestones:
            if milestone.id == milestone_id:
                milestone.completed = not milestone.completed
                return milestone
        logger.warning(f"No milestone with id {milestone_id}")
        return None

    @property
    def completion_percentage(self) -> int:
        """Share of completed milestones, as a whole percentage rounded down."""
        total = len(self.milestones)
        if total == 0:
            return 0
        completed = sum(1 for milestone in self.milestones if milestone.completed)
        return completed * 100 // total

    @property
    def completed_goals_count(self) -> int:
        return sum(1 for goal in self.daily_goals if goal.completed)

    def upcoming_goals(self, now: Optional[datetime] = None, limit: int = UPCOMING_GOALS_LIMIT) -> List[DailyGoal]:
        """
        Open goals that are still due, soonest first.

        Args:
            now: Reference time; defaults to the current UTC time
            limit: Maximum number of goals returned

        Returns:
            Up to `limit` goals that are not completed and due after `now`
        """
        now = now or datetime.now(timezone.utc)
        pending = [goal for goal in self.daily_goals if not goal.completed and goal.due_date > now]
        return sorted(pending, key=lambda goal: goal.due_date)[:limit]

    def milestones_for(self, business_idea_id: str) -> List[Milestone]:
        return sorted(
            (milestone for milestone in self.milestones if milestone.business_idea_id == business_idea_id),
            key=lambda milestone: milestone.order,
        )

    def save(self):
        if self.settings is None:
            return
        self.settings.save(SettingsKeys.DAILY_GOALS_DATA, self.daily_goals)
        self.settings.save(SettingsKeys.MILESTONES_DATA, self.milestones)
        logger.debug(f"Saved {len(self.daily_goals)} goals and {len(self.milestones)} milestones")

    def load(self):
        if self.settings is None:
            return
        self.daily_goals = self.settings.get(SettingsKeys.DAILY_GOALS_DATA, List[DailyGoal]) or []
        self.milestones = self.settings.get(SettingsKeys.MILESTONES_DATA, List[Milestone]) or []


class OnboardingProgress:
    """Position in the onboarding flow: intro screens followed by quiz questions."""

    def __init__(self, question_count: int, settings: Optional[SettingsStore] = None):
        self.question_count = question_count
        self.settings = settings
        self.screen_index = 0
        self.question_index = 0
        self.in_questionnaire = False

    @property
    def total_steps(self) -> int:
        return ONBOARDING_SCREENS_COUNT + self.question_count

    @property
    def current_step(self) -> int:
        """1-based step number across screens and questions."""
        if self.in_questionnaire:
            return ONBOARDING_SCREENS_COUNT + self.question_index + 1
        return self.screen_index + 1

    @property
    def total_progress(self) -> float:
        if self.total_steps == 0:
            return 1.0
        return min(1.0, self.current_step / self.total_steps)

    @property
    def is_completed(self) -> bool:
        return bool(self.settings and self.settings.has_completed_onboarding)

    def start_questionnaire(self):
        self.in_questionnaire = True
        self.question_index = 0
        self.screen_index = max(self.screen_index, ONBOARDING_SCREENS_COUNT - 1)

    def advance(self):
        """Move to the next screen or question; the last intro screen leads into the questionnaire."""
        if not self.in_questionnaire:
            if self.screen_index < ONBOARDING_SCREENS_COUNT - 1:
                self.screen_index += 1
            else:
                self.start_questionnaire()
        elif self.question_index < self.question_count - 1:
            self.question_index += 1

    def complete(self):
        if self.settings is not None:
            self.settings.has_completed_onboarding = True
        self.reset_position()

    def reset_position(self):
        self.screen_index = 0
        self.question_index = 0
        self.in_questionnaire = False

    def reset(self):
        """Forget completion so the user goes through onboarding again."""
        if self.settings is not None:
            self.settings.has_completed_onboarding = False
        self.reset_position()
