"""
Caller context passed explicitly into every service operation
"""

from dataclasses import dataclass
import uuid

from teachflow.models.user import User


@dataclass(frozen=True)
class Caller:
    """Authenticated identity a request acts on behalf of (the tenant)"""
    id: uuid.UUID
    email: str
    name: str
    currency: str
    timezone: str

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            currency=user.default_currency,
            timezone=user.timezone,
        )
