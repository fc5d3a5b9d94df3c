"""Identity of the acting user, as asserted by the platform's access token."""

from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict

from contenttrust_api.database.models.base import UserRole


class User(BaseModel):
    """Authenticated caller."""

    pk: UUID
    role: UserRole = UserRole.MEMBER

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    @property
    def is_moderator(self) -> bool:
        return self.role in (UserRole.MODERATOR, UserRole.ADMIN)
