from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ORGANIZER = "Organizer"
    CUSTOMER = "Customer"


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, produced by the identity gate for each request."""

    user_id: str
    role: Role

    @property
    def is_organizer(self) -> bool:
        return self.role == Role.ORGANIZER
