"""Project service - Business logic for project operations."""

from __future__ import annotations

from shadfocus_cli.exceptions import InvalidInputError, LastProjectError, NotFoundError
from shadfocus_cli.models import PROJECT_COLORS, Project, ProjectColor
from shadfocus_cli.repositories import PersistenceGateway, read_once
from shadfocus_cli.utils.logger import get_logger

logger = get_logger("projects")


class ProjectService:
    """Service for project business logic.

    Projects are plain labels for timers and sessions. Sessions keep their own
    copy of the project name and color, so renaming or deleting a project
    never rewrites history.
    """

    def __init__(self, gateway: PersistenceGateway, user_id: str):
        """Initialize the project service.

        Args:
            gateway: Persistence gateway
            user_id: Owner of the projects
        """
        self.gateway = gateway
        self.user_id = user_id

    def list_projects(self) -> list[Project]:
        """List the user's projects, seeding the defaults for a new user."""
        return read_once(self.gateway.subscribe_projects, self.user_id)

    def resolve(self, ref: str) -> Project:
        """Find a project by exact id, or else by case-insensitive name.

        Raises:
            NotFoundError: If nothing matches
        """
        projects = self.list_projects()
        for project in projects:
            if project.id == ref:
                return project
        wanted = ref.strip().casefold()
        for project in projects:
            if project.name.casefold() == wanted:
                return project
        raise NotFoundError(f"Project '{ref}' not found")

    def create_project(self, name: str, color: ProjectColor = "blue") -> Project:
        """Create a new project.

        Raises:
            InvalidInputError: If the name is blank or the color unknown
        """
        name = self._clean_name(name)
        self._check_color(color)
        project = self.gateway.add_project(self.user_id, name, color)
        logger.info("created project %s (%s)", project.name, project.id)
        return project

    def rename_project(self, ref: str, name: str) -> Project:
        project = self.resolve(ref)
        return self.gateway.update_project(
            self.user_id, project.id, name=self._clean_name(name)
        )

    def recolor_project(self, ref: str, color: ProjectColor) -> Project:
        self._check_color(color)
        project = self.resolve(ref)
        return self.gateway.update_project(self.user_id, project.id, color=color)

    def delete_project(self, ref: str) -> Project:
        """Delete a project. The last remaining project cannot be deleted.

        Raises:
            LastProjectError: If this is the user's only project
            NotFoundError: If the project does not exist
        """
        project = self.resolve(ref)
        if len(self.list_projects()) <= 1:
            raise LastProjectError("Cannot delete the last project")
        self.gateway.delete_project(self.user_id, project.id)
        logger.info("deleted project %s (%s)", project.name, project.id)
        return project

    @staticmethod
    def _clean_name(name: str) -> str:
        name = name.strip()
        if not name:
            raise InvalidInputError("Project name cannot be empty")
        return name

    @staticmethod
    def _check_color(color: str) -> None:
        if color not in PROJECT_COLORS:
            raise InvalidInputError(
                f"Unknown color '{color}'. Choose from: {', '.join(PROJECT_COLORS)}"
            )


def get_project_service() -> ProjectService:
    """Project service for the configured database and user."""
    from shadfocus_cli.services.config_service import get_config_service

    config_service = get_config_service()
    return ProjectService(config_service.get_gateway(), config_service.config.user_id)
