"""Project data models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ProjectColor = Literal["red", "green", "purple", "blue", "yellow"]

PROJECT_COLORS: tuple[str, ...] = ("red", "green", "purple", "blue", "yellow")


class Project(BaseModel):
    """Project model."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    color: ProjectColor = "blue"


# Seeded for users that have no projects yet
DEFAULT_PROJECTS: tuple[Project, ...] = (
    Project(id="default-1", name="Deep Work", color="purple"),
    Project(id="default-2", name="Study", color="blue"),
    Project(id="default-3", name="Creative", color="yellow"),
)
