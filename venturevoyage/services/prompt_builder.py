"""
Prompt templates for business idea generation and idea advice.
"""

from typing import Sequence

from venturevoyage.models.idea import UserAttributes
from venturevoyage.utils.constants import IDEAS_PER_REQUEST

# Field labels the model must fill for every idea, in section order.
IDEA_FIELDS = [
    "Business Title",
    "Description (2-3 sentences)",
    "Category (e.g., Tech, Service, Creative, etc.)",
    "Difficulty Level (Easy/Medium/Hard)",
    "Estimated Revenue Range",
    "Time to Launch",
    "Required Skills",
    "Startup Cost",
    "Profit Margin Estimate",
    "Market Demand (High/Medium/Low)",
    "Competition Level (High/Medium/Low)",
    "Personalized Notes",
]

IDEAS_PROMPT_TEMPLATE = """Based on the following user profile, generate {count} unique and personalized business ideas:

Skills: {skills}
Personality Traits: {personality}
Interests: {interests}

For each idea, provide:
{fields}

Format each idea clearly with numbered sections."""

ADVICE_PROMPT_TEMPLATE = (
    "Provide practical advice and next steps for the following business idea: {title}. "
    "Description: {description}. Keep response concise and actionable."
)


class PromptBuilder:
    """Renders the fixed prompt templates. Pure, no I/O."""

    def build_ideas_prompt(
        self,
        skills: Sequence[str],
        personality: Sequence[str],
        interests: Sequence[str],
    ) -> str:
        """
        Build the idea generation prompt from the user's quiz answers.

        Args:
            skills: Selected skills
            personality: Selected personality traits
            interests: Selected interests

        Returns:
            Prompt requesting five ideas with twelve numbered fields each
        """
        fields = "\n".join(f"{number}. {label}" for number, label in enumerate(IDEA_FIELDS, 1))
        return IDEAS_PROMPT_TEMPLATE.format(
            count=IDEAS_PER_REQUEST,
            skills=", ".join(skills),
            personality=", ".join(personality),
            interests=", ".join(interests),
            fields=fields,
        )

    def build_ideas_prompt_for(self, attributes: UserAttributes) -> str:
        return self.build_ideas_prompt(
            attributes.skills,
            attributes.personality_traits,
            attributes.interests,
        )

    def build_advice_prompt(self, title: str, description: str) -> str:
        return ADVICE_PROMPT_TEMPLATE.format(title=title, description=description)
