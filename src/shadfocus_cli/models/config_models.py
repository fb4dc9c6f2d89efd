"""Application configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class AppConfig(BaseModel):
    """Main ShadFocus configuration."""

    user_id: str = Field(default="local", description="Owner of timers and sessions")
    database_path: str | None = Field(
        default=None, description="SQLite file; defaults to the user data dir"
    )
    default_mode: Literal["pomodoro", "stopwatch"] = Field(default="pomodoro")
    debounce_seconds: float = Field(
        default=0.5, ge=0, description="Coalescing window for notes/tags edits"
    )
    tick_seconds: float = Field(default=1.0, gt=0, description="Display refresh cadence")
    sound: bool = Field(default=True, description="Ring the terminal bell on completion")

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("user_id cannot be empty")
        return v.strip()
