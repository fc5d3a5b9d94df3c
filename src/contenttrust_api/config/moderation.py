"""Moderation policy configuration for the Content Trust API."""

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class ModerationSettings(BaseSettings):
    """Policy knobs for the moderation pipeline."""

    # Queue priority escalation
    ai_score_high_threshold: float = Field(
        default=80, description="AI score at or above which an item is high priority"
    )
    reports_high_threshold: int = Field(
        default=5, description="Distinct reporters for high priority"
    )
    reports_medium_threshold: int = Field(
        default=2, description="Distinct reporters for medium priority"
    )

    # Soft delete retention
    soft_delete_retention_days: int = Field(
        default=90, description="Days a soft-deleted item stays recoverable"
    )
    soft_delete_cleanup_interval_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,
        description="Minutes between expired soft delete sweeps, at most daily",
    )

    # Expert verification
    expert_validity_days: int = Field(
        default=365, description="Days a verification stays valid"
    )
    expert_renewal_window_days: int = Field(
        default=30, description="Days before expiry an expert is due for renewal"
    )

    # Edit request rate limits (per author, sliding windows)
    edit_requests_per_hour: int = Field(
        default=10, description="Edit requests per trailing hour per author"
    )
    edit_requests_per_day: int = Field(
        default=50, description="Edit requests per trailing 24 hours per author"
    )

    # Query paging
    max_page_size: int = Field(default=100, description="Largest page a query returns")

    model_config = SettingsConfigDict(env_prefix="MODERATION_", case_sensitive=False)


def get_moderation_settings() -> ModerationSettings:
    """Get moderation settings from environment variables."""
    return ModerationSettings()
