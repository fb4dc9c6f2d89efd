"""Per-user timer settings."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 180
DEFAULT_DURATION_MINUTES = 25


def clamp_duration(minutes: int) -> int:
    """Clamp a pomodoro duration to the supported range of minutes."""
    return max(MIN_DURATION_MINUTES, min(MAX_DURATION_MINUTES, minutes))


class Settings(BaseModel):
    """User settings singleton, created lazily with defaults."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    timer_duration: int = Field(
        default=DEFAULT_DURATION_MINUTES,
        ge=MIN_DURATION_MINUTES,
        le=MAX_DURATION_MINUTES,
    )
    dark_mode: bool = False

    @property
    def duration_seconds(self) -> int:
        return self.timer_duration * 60

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
