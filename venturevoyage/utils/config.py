import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

from venturevoyage.utils.constants import (
    DEFAULT_GOOGLE_AI_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    EMBEDDED_GOOGLE_AI_API_KEY,
    SettingsKeys,
)


class Config:
    def __init__(self, manifest_file=None):
        # Load appropriate .env file based on environment
        self.env = os.getenv("VENTUREVOYAGE_ENV", "dev")
        self._load_env_file()

        # Package paths; the bundled manifest ships as package data
        self.package_dir = Path(__file__).resolve().parent.parent
        if manifest_file is None:
            manifest_file = os.getenv("MANIFEST_FILE") or self.package_dir / "venturevoyage.yaml"
        self.manifest_file = Path(manifest_file)

        # Google AI settings (key and model are resolved lazily, see google_ai_api_key)
        self.google_ai_base_url = os.getenv("GOOGLE_AI_BASE_URL")

        # OpenAI settings
        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        self.openai_model = os.getenv("OPENAI_MODEL", "gpt-4o")

        # Network settings
        self.request_timeout = float(os.getenv("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))

        # Local storage
        self.cache_dir = Path(os.getenv("CACHE_DIR", Path.home() / ".cache" / "VentureVoyageCache"))
        self.settings_db = os.getenv("SETTINGS_DB", str(Path.home() / ".venturevoyage" / "settings.db"))

        # Logging settings
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        # Load bundled manifest from YAML
        self.manifest = self._load_manifest()

    def _load_env_file(self):
        """Load the appropriate .env file based on the environment."""
        env_file = ".env"

        # Check for environment-specific .env file
        if self.env != "dev":
            env_specific_file = f".env.{self.env}"
            if Path(env_specific_file).exists():
                env_file = env_specific_file
                print(f"Loading environment from {env_file}")
            else:
                print(f"Warning: {env_specific_file} not found, falling back to .env")

        # Load the environment file
        load_dotenv(env_file)

    def _load_manifest(self):
        """Load the application manifest (bundle values) from YAML."""
        if not self.manifest_file.exists():
            return {}

        with open(self.manifest_file, 'r') as file:
            manifest = yaml.safe_load(file) or {}
            return {
                str(key): str(value)
                for key, value in manifest.items()
                if value is not None
            }

    def _sources(self, name, settings=None):
        """Yield (source, value) pairs for a setting, highest priority first."""
        if settings is not None:
            yield "Settings", settings.get_string(name)
        yield "Environment", os.getenv(name)
        yield "Manifest", self.manifest.get(name)

    def resolve(self, name, settings=None, default=""):
        """
        Resolve a setting from the runtime override, the environment, the
        manifest, then the default. The first non-empty value wins.

        Args:
            name: Setting name (also the env var and manifest key)
            settings: Optional SettingsStore holding runtime overrides
            default: Value used when no source provides one

        Returns:
            The resolved value
        """
        for _, value in self._sources(name, settings):
            if value:
                return value
        return default

    def google_ai_api_key(self, settings=None):
        return self.resolve(SettingsKeys.GOOGLE_AI_API_KEY, settings, EMBEDDED_GOOGLE_AI_API_KEY)

    def google_ai_model(self, settings=None):
        return self.resolve(SettingsKeys.GOOGLE_AI_MODEL, settings, DEFAULT_GOOGLE_AI_MODEL)

    def google_ai_key_source(self, settings=None):
        """Return the name of the source that supplies GOOGLE_AI_API_KEY."""
        for source, value in self._sources(SettingsKeys.GOOGLE_AI_API_KEY, settings):
            if value:
                return source
        if EMBEDDED_GOOGLE_AI_API_KEY:
            return "Embedded"
        return "None"


# Create a global config instance
config = Config()
