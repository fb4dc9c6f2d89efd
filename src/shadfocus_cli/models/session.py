"""Session records: immutable history of completed or early-finished timers."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .project import ProjectColor


def normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Trim tags and drop blanks and duplicates, keeping first-seen order."""
    seen: list[str] = []
    for tag in tags:
        clean = tag.strip()
        if clean and clean not in seen:
            seen.append(clean)
    return tuple(seen)


class Session(BaseModel):
    """A persisted record of one completed or early-finished timer.

    ``project_name`` and ``color`` are copies taken when the session was
    created, so later project edits or deletions never rewrite history.
    Edits never mutate a record; they produce a new one.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    project_id: str
    project_name: str
    start_time: int  # epoch ms
    end_time: int  # epoch ms
    duration_seconds: int = Field(ge=0)
    notes: str = ""
    tags: tuple[str, ...] = ()
    color: ProjectColor = "blue"

    @model_validator(mode="after")
    def _check_interval(self) -> Session:
        if self.end_time < self.start_time:
            raise ValueError("endTime must not be before startTime")
        return self

    def to_document(self) -> dict:
        document = self.model_dump(by_alias=True)
        document["tags"] = list(self.tags)
        return document
