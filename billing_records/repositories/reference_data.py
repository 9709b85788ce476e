"""Reference data (users and projects) used to resolve import identifiers.

This module provides an in-memory directory of users and projects with the
lookups the import needs, loadable from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from billing_records.models.project import Project, User

logger = logging.getLogger(__name__)

DEFAULT_PROJECTS: List[Dict[str, Any]] = [
    {
        "id": "proj1",
        "name": "Website Redesign",
        "billing_type": "hourly",
        "rate_per_hour": "75",
    },
    {
        "id": "proj2",
        "name": "Mobile App Development",
        "billing_type": "hourly",
        "rate_per_hour": "90",
    },
    {
        "id": "proj3",
        "name": "Data Entry Batch A",
        "billing_type": "count_based",
        "count_metric_label": "Records Processed",
        "count_divisor": "1",
        "count_multiplier": "0.5",
    },
    {
        "id": "proj4",
        "name": "Content Moderation X",
        "billing_type": "count_based",
        "count_metric_label": "Items Reviewed",
        "count_divisor": "100",
        "count_multiplier": "5",
    },
]


class ReferenceData:
    """Directory of known users and projects.

    Lookups follow the order the data was loaded in, so the first match
    wins when an identifier is ambiguous.

    Example:
        >>> ref = ReferenceData.default()
        >>> ref.find_project("website redesign").id
        'proj1'
    """

    def __init__(
        self,
        users: Optional[Iterable[User]] = None,
        projects: Optional[Iterable[Project]] = None,
    ):
        self.users: List[User] = list(users or [])
        self.projects: List[Project] = list(projects or [])

    @classmethod
    def default(cls, users: Optional[Iterable[User]] = None) -> "ReferenceData":
        """Create reference data with the built-in sample projects.

        Args:
            users: Optional users to include

        Returns:
            ReferenceData instance
        """
        projects = [Project.model_validate(p) for p in DEFAULT_PROJECTS]
        return cls(users=users, projects=projects)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ReferenceData":
        """Load users and projects from a JSON file.

        The file holds ``{"users": [...], "projects": [...]}``. A file without
        a ``projects`` key falls back to the built-in sample projects.

        Args:
            path: Path to the JSON file

        Returns:
            ReferenceData instance

        Raises:
            ValueError: If the file is not valid JSON or an entry is invalid
        """
        path = Path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Reference data file {path} is not valid JSON: {e}")

        try:
            users = [User.model_validate(u) for u in payload.get("users", [])]
            projects = [
                Project.model_validate(p)
                for p in payload.get("projects", DEFAULT_PROJECTS)
            ]
        except ValidationError as e:
            raise ValueError(f"Invalid reference data in {path}: {e}")

        logger.info(
            f"Loaded {len(users)} user(s) and {len(projects)} project(s) "
            f"from {path}"
        )
        return cls(users=users, projects=projects)

    def find_user(self, identifier: str) -> Optional[User]:
        """Resolve a user by id, username or "first last"."""
        return next((u for u in self.users if u.matches(identifier)), None)

    def find_project(self, identifier: str) -> Optional[Project]:
        """Resolve a project by id or name."""
        return next((p for p in self.projects if p.matches(identifier)), None)

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def user_display_name(self, user_id: str) -> str:
        """Get "First Last" for a user id, or "Unknown User"."""
        user = self.get_user(user_id)
        return user.full_name if user else "Unknown User"
