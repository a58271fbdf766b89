# ABOUTME: Configuration settings for the phase scheduler and encounter runtime using Pydantic Settings.
# ABOUTME: Loads environment variables and .env values and provides type-safe configuration access.

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for rotated log files"
    )
    log_to_file: bool = Field(
        default=False,
        description="Write logs to files in log_dir in addition to stderr"
    )

    # Run seeding
    seed: str | None = Field(
        default=None,
        description="Fixed run seed; derived from the current date when unset"
    )
    online: bool = Field(
        default=False,
        description="Whether the progress API (daily seeds, clear reports) is reachable"
    )

    # Game rules
    enable_retries: bool = Field(
        default=True,
        description="Offer a retry of the current wave on defeat"
    )
    classic_final_wave: int = Field(
        default=200,
        ge=1,
        description="Classic runs that pass this wave count as a victory"
    )
    mystery_encounter_min_wave: int = Field(
        default=10,
        ge=1,
        description="First wave where mystery encounters may appear"
    )
    mystery_encounter_max_wave: int = Field(
        default=180,
        ge=1,
        description="Last wave where mystery encounters may appear"
    )
    chest_min_party_size: int = Field(
        default=2,
        ge=1,
        description="Minimum party size for the mysterious chest encounter"
    )
    chest_max_party_size: int = Field(
        default=6,
        ge=1,
        description="Maximum party size for the mysterious chest encounter"
    )
    save_slot_count: int = Field(
        default=5,
        ge=1,
        description="Number of save slots offered by the starter selection"
    )

    # Hosting
    effect_delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Simulated effect duration when hosted on an asyncio loop"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        """Reject inverted wave and party size ranges"""
        if self.mystery_encounter_min_wave > self.mystery_encounter_max_wave:
            raise ValueError(
                "mystery_encounter_min_wave must not exceed mystery_encounter_max_wave"
            )
        if self.chest_min_party_size > self.chest_max_party_size:
            raise ValueError(
                "chest_min_party_size must not exceed chest_max_party_size"
            )
        return self


# Singleton settings instance - lazy initialization to allow import without .env
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the singleton settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
