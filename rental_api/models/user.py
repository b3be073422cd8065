from dataclasses import dataclass

from ..utils.constants import Role


@dataclass
class User:
    """
    Authenticated principal. The booking arbiter only ever sees
    (user_id, is_admin); everything else is for the auth endpoints.
    """
    user_id: str
    username: str
    email: str
    role: str  # "customer" | "admin"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        return cls(
            user_id=d.get("user_id") or d.get("id"),
            username=d.get("username") or "",
            email=d.get("email") or "",
            role=(d.get("role") or Role.CUSTOMER).lower(),
        )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
        }
