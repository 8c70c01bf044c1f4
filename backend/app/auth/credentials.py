"""
The single configured admin account.

Credentials come from settings (ADMIN_USERNAME, ADMIN_PASSWORD_HASH,
ADMIN_USER_ID, ADMIN_ROLE); there is no user table.
"""

from dataclasses import dataclass

from meapi.config import Settings, get_settings
from meapi.security.passwords import verify_password


@dataclass(frozen=True)
class AdminAccount:
    id: int
    username: str
    password_hash: str
    role: str

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AdminAccount":
        settings = settings or get_settings()
        return cls(
            id=settings.admin_user_id,
            username=settings.admin_username,
            password_hash=settings.admin_password_hash,
            role=settings.admin_role,
        )

    def public_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}


def authenticate(username: str, password: str) -> AdminAccount | None:
    """Return the account when both username and password match, else None."""
    account = AdminAccount.from_settings()
    if username != account.username:
        return None
    if not verify_password(password, account.password_hash):
        return None
    return account
