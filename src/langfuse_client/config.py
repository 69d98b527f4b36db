import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

from langfuse_client.errors import ConfigurationError

load_dotenv()

DEFAULT_BASE_URL = "https://cloud.langfuse.com"
PROMPTS_PATH = "/api/public/v2/prompts"
SCORES_PATH = "/api/public/scores"

CLIENT_VERSION = "0.1.0"
USER_AGENT = f"langfuse-client-python/{CLIENT_VERSION}"


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass(frozen=True)
class Settings:
    """Client settings loaded from environment variables."""

    # API
    base_url: str = field(
        default_factory=lambda: os.getenv("LANGFUSE_BASE_URL") or os.getenv("LANGFUSE_HOST") or DEFAULT_BASE_URL
    )
    public_key: str | None = field(default_factory=lambda: os.getenv("LANGFUSE_PUBLIC_KEY"))
    secret_key: str | None = field(default_factory=lambda: os.getenv("LANGFUSE_SECRET_KEY"))
    timeout: float = field(default_factory=lambda: float(os.getenv("LANGFUSE_TIMEOUT", "30")))

    # Prompt cache
    prompt_cache_enabled: bool = field(
        default_factory=lambda: os.getenv("LANGFUSE_PROMPT_CACHE_ENABLED", "true").lower() == "true"
    )
    prompt_cache_ttl: float = field(default_factory=lambda: float(os.getenv("LANGFUSE_PROMPT_CACHE_TTL", "60")))
    # None keeps lazy eviction only
    prompt_cache_sweep_interval: float | None = field(
        default_factory=lambda: _env_float("LANGFUSE_PROMPT_CACHE_SWEEP_INTERVAL")
    )

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.timeout <= 0:
            raise ValueError(f"LANGFUSE_TIMEOUT must be positive, got {self.timeout}")

        if self.prompt_cache_sweep_interval is not None and self.prompt_cache_sweep_interval <= 0:
            raise ValueError(
                "LANGFUSE_PROMPT_CACHE_SWEEP_INTERVAL must be positive when set, "
                f"got {self.prompt_cache_sweep_interval}"
            )

    @property
    def has_credentials(self) -> bool:
        """Check whether both API keys are present."""
        return bool(self.public_key) and bool(self.secret_key)

    def validate_credentials(self) -> None:
        """Ensure the settings are complete enough to talk to the API.

        Raises:
            ConfigurationError: If the base URL or either key is missing
        """
        missing = []
        if not self.base_url:
            missing.append("LANGFUSE_BASE_URL")
        if not self.public_key:
            missing.append("LANGFUSE_PUBLIC_KEY")
        if not self.secret_key:
            missing.append("LANGFUSE_SECRET_KEY")
        if missing:
            raise ConfigurationError(
                f"Missing Langfuse configuration: {', '.join(missing)}",
                {"missing": missing},
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
