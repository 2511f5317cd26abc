"""
Turns free-form model completions into BusinessIdea records.

The model is asked for numbered sections (see prompt_builder.IDEA_FIELDS) but
is free to ignore the format, so parsing is best-effort: anything that does
not yield at least one titled idea falls back to a default idea.
"""

import re
from typing import Dict, List, Optional

from venturevoyage.models.idea import BusinessIdea, Difficulty, Level
from venturevoyage.utils.constants import NO_SUGGESTIONS_TEXT
from venturevoyage.utils.logger import logger

# Label prefix -> BusinessIdea attribute. Checked in order, first match wins.
FIELD_LABELS = [
    ("business title", "title"),
    ("title", "title"),
    ("description", "description"),
    ("category", "category"),
    ("difficulty", "difficulty"),
    ("estimated revenue", "estimated_revenue"),
    ("revenue", "estimated_revenue"),
    ("time to launch", "time_to_launch"),
    ("required skills", "required_skills"),
    ("startup cost", "startup_cost"),
    ("profit margin", "profit_margin"),
    ("market demand", "market_demand"),
    ("competition", "competition"),
    ("personalized notes", "personalized_notes"),
    ("personalised notes", "personalized_notes"),
]

FIELD_LINE = re.compile(r"^(\d{1,2})[.)]\s*([^:]{2,60}?)\s*:\s*(.*)$")
IDEA_HEADING = re.compile(r"^(?:business\s+)?idea\s*#?\s*\d+\b", re.IGNORECASE)
MARKUP = re.compile(r"[*#`]+")
BULLET = re.compile(r"^[-•]\s+")
LEVEL_WORD = re.compile(r"\b(high|medium|low)\b", re.IGNORECASE)
DIFFICULTY_WORD = re.compile(r"\b(easy|medium|hard)\b", re.IGNORECASE)


def _clean_line(line: str) -> str:
    return BULLET.sub("", MARKUP.sub("", line).strip()).strip()


def _field_for(label: str) -> Optional[str]:
    label = label.strip().lower()
    for prefix, attribute in FIELD_LABELS:
        if label.startswith(prefix):
            return attribute
    return None


def _level(value: str) -> Level:
    match = LEVEL_WORD.search(value or "")
    return Level(match.group(1).capitalize()) if match else Level.MEDIUM


def _difficulty(value: str) -> Difficulty:
    match = DIFFICULTY_WORD.search(value or "")
    return Difficulty(match.group(1).capitalize()) if match else Difficulty.MEDIUM


def _split_skills(value: str) -> List[str]:
    return [skill.strip() for skill in re.split(r"[,;]", value or "") if skill.strip()]


class ResponseParser:
    """Parses completions into ideas and advice text. Never raises."""

    def parse_business_ideas(self, text: str, user_id: str = "") -> List[BusinessIdea]:
        """
        Parse a completion into business ideas.

        Args:
            text: Raw completion text, possibly empty or unstructured
            user_id: Owner stamped on every returned idea

        Returns:
            The parsed ideas, or a single fallback idea when none could be parsed
        """
        try:
            ideas = [
                idea for idea in (
                    self._to_idea(fields, user_id) for fields in self._parse_sections(text or "")
                )
                if idea is not None
            ]
        except Exception as e:
            logger.error(f"Error parsing business ideas: {e}")
            ideas = []

        if not ideas:
            logger.info("No structured ideas found in completion, using fallback idea")
            return [self.fallback_idea(user_id)]

        logger.info(f"Parsed {len(ideas)} business ideas")
        return ideas

    def parse_suggestions(self, text: str) -> str:
        text = (text or "").strip()
        return text if text else NO_SUGGESTIONS_TEXT

    def fallback_idea(self, user_id: str = "") -> BusinessIdea:
        return BusinessIdea(
            title="AI-Powered Business Consultant",
            description="Provide personalized business consulting using AI to help entrepreneurs.",
            category="Technology",
            difficulty=Difficulty.MEDIUM,
            estimated_revenue="$50,000 - $150,000/year",
            time_to_launch="3-4 months",
            required_skills=["AI/ML", "Business Strategy", "Communication"],
            startup_cost="$5,000 - $15,000",
            profit_margin="60-75%",
            market_demand=Level.HIGH,
            competition=Level.MEDIUM,
            user_id=user_id,
            personalized_notes="Perfect match for your tech skills and entrepreneurial interests",
        )

    def _parse_sections(self, text: str) -> List[Dict[str, str]]:
        """Group numbered field lines into one dict per idea."""
        sections: List[Dict[str, str]] = []
        current: Optional[Dict[str, str]] = None
        last_field: Optional[str] = None

        for raw_line in text.splitlines():
            line = _clean_line(raw_line)
            if not line:
                continue

            if IDEA_HEADING.match(line):
                last_field = None
                continue

            match = FIELD_LINE.match(line)
            field = _field_for(match.group(2)) if match else None
            if field is not None:
                # A title line opens the next idea
                if field == "title":
                    current = {}
                    sections.append(current)
                if current is None:
                    continue
                current[field] = match.group(3).strip()
                last_field = field
            elif current is not None and last_field is not None:
                # Wrapped value; a title only takes the next line when it was left empty
                if last_field == "title" and current["title"]:
                    continue
                current[last_field] = f"{current[last_field]} {line}".strip()

        return sections

    def _to_idea(self, fields: Dict[str, str], user_id: str) -> Optional[BusinessIdea]:
        title = fields.get("title", "").strip().strip("\"'")
        if not title:
            return None
        return BusinessIdea(
            title=title,
            description=fields.get("description", ""),
            category=fields.get("category", ""),
            difficulty=_difficulty(fields.get("difficulty", "")),
            estimated_revenue=fields.get("estimated_revenue", ""),
            time_to_launch=fields.get("time_to_launch", ""),
            required_skills=_split_skills(fields.get("required_skills", "")),
            startup_cost=fields.get("startup_cost", ""),
            profit_margin=fields.get("profit_margin", ""),
            market_demand=_level(fields.get("market_demand", "")),
            competition=_level(fields.get("competition", "")),
            user_id=user_id,
            personalized_notes=fields.get("personalized_notes", ""),
        )
