"""Constants used throughout the application."""

# Google AI endpoint
GOOGLE_AI_BASE_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_GOOGLE_AI_MODEL = "gemini-2.5-flash"
# Blank: the key comes from settings, env or manifest
EMBEDDED_GOOGLE_AI_API_KEY = ""

# Network
DEFAULT_REQUEST_TIMEOUT = 30.0
AI_SERVICE_MAX_WORKERS = 4

# Cache expiration defaults (seconds)
DEFAULT_MEMORY_TTL = 3600
DEFAULT_DISK_TTL = 7 * 86400

# Ideas
IDEAS_PER_REQUEST = 5
NO_SUGGESTIONS_TEXT = "No suggestions available"

# Onboarding
ONBOARDING_SCREENS_COUNT = 2

# Dashboard
UPCOMING_GOALS_LIMIT = 5


class SettingsKeys:
    """Keys in the persisted settings store."""

    HAS_COMPLETED_ONBOARDING = "hasCompletedOnboarding"
    BUSINESS_IDEAS_DATA = "businessIdeasData"
    USER_PROFILE_DATA = "userProfileData"
    SELECTED_BUSINESS_IDEA_ID = "selectedBusinessIdeaID"
    DAILY_GOALS_DATA = "dailyGoalsData"
    MILESTONES_DATA = "milestonesData"
    GOOGLE_AI_API_KEY = "GOOGLE_AI_API_KEY"
    GOOGLE_AI_MODEL = "GOOGLE_AI_MODEL"

    # Removed on reset; API overrides are kept
    APP_DATA = (
        HAS_COMPLETED_ONBOARDING,
        BUSINESS_IDEAS_DATA,
        USER_PROFILE_DATA,
        SELECTED_BUSINESS_IDEA_ID,
        DAILY_GOALS_DATA,
        MILESTONES_DATA,
    )


# Quiz catalogues
ALL_SKILLS = [
    "Programming", "Data Analysis", "Design", "Marketing", "Sales",
    "Writing", "Public Speaking", "Project Management", "Finance", "Leadership",
    "Social Media", "Video Production", "Graphic Design", "SEO", "E-commerce",
]

ALL_PERSONALITY_TRAITS = [
    "Creative", "Analytical", "Organized", "Risk-Taker", "Networker",
    "Detail-Oriented", "Visionary", "Collaborative", "Independent", "Problem-Solver",
]

ALL_INTERESTS = [
    "Technology", "Business", "Fitness", "Education", "Entertainment",
    "Fashion", "Food", "Travel", "Real Estate", "Consulting",
    "Coaching", "Content Creation", "E-Learning", "Sustainability", "Art",
]
