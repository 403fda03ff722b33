"""
Teams and team membership
"""
from typing import Any, Dict, List
from uuid import UUID

from app.core.errors import ConflictError, NotFoundError
from app.models.profile import Team, TeamUser
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values


class TeamService(BaseCrudService[Team]):
    model = Team
    resource_name = "Team"
    search_fields = ("name", "description")


class TeamUserService(BaseCrudService[TeamUser]):
    """Membership of users in teams"""

    model = TeamUser
    resource_name = "TeamUser"

    def create(self, data: Dict[str, Any]) -> TeamUser:
        """
        Add a user to a team

        Raises:
            NotFoundError: If the team or user does not exist
            ConflictError: If the user is already a member
        """
        data = clean_values(data)
        if self.db.get(Team, data["team_id"]) is None:
            raise NotFoundError(f"Team with ID {data['team_id']} not found")
        if self.db.get(User, data["user_id"]) is None:
            raise NotFoundError(f"User with ID {data['user_id']} not found")

        existing = (
            self.db.query(TeamUser.id)
            .filter(TeamUser.team_id == data["team_id"], TeamUser.user_id == data["user_id"])
            .first()
        )
        if existing:
            raise ConflictError("User is already a member of this team")
        return super().create(data)

    def find_by_team(self, team_id: UUID) -> List[TeamUser]:
        return self.find_many_by("team_id", team_id)
