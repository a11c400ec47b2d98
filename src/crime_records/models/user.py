"""
User Data Models

Officer accounts as exposed over the API. The password hash never leaves
the credential store.
"""

from pydantic import Field

from .common import CamelModel, UtcDateTime


class UserSummary(CamelModel):
    """Owner/adder details embedded in incident and evidence responses"""

    id: str
    name: str
    badge_id: str

    @classmethod
    def from_db(cls, user_db) -> "UserSummary":
        return cls(id=user_db.id, name=user_db.name, badge_id=user_db.badge_id)


class User(CamelModel):
    """User account without credentials"""

    id: str = Field(..., description="Internal user identifier")
    badge_id: str = Field(..., description="Human-facing login identifier")
    name: str = Field(..., description="Officer name")
    is_admin: bool = Field(default=False, description="Administrator flag")
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_db(cls, user_db) -> "User":
        """Create API model from a UserDB row, dropping the password hash"""
        return cls(
            id=user_db.id,
            badge_id=user_db.badge_id,
            name=user_db.name,
            is_admin=bool(user_db.is_admin),
            created_at=user_db.created_at,
            updated_at=user_db.updated_at,
        )
