# storefront/models/session.py

"""Account and session models for the authenticated actor."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Account:
    """A backend-held login record."""

    username: str
    password: str
    role: str = ""

    @classmethod
    def from_record(cls, record: Any) -> "Account":
        """Coerce a ``/users`` entry; raises ``ValueError`` if malformed."""
        if not isinstance(record, dict):
            raise ValueError("Account record must be an object")
        username = record.get("username")
        password = record.get("password")
        if not isinstance(username, str) or not isinstance(password, str):
            raise ValueError("Account record needs string credentials")
        role = record.get("role")
        return cls(
            username=username,
            password=password,
            role=role if isinstance(role, str) else "",
        )


@dataclass(frozen=True)
class Session:
    """The identity persisted after a successful login."""

    username: str
    role: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialise for local storage."""
        return {"username": self.username, "role": self.role}

    @classmethod
    def from_dict(cls, data: Any) -> "Session":
        """Rebuild a session from storage; raises ``ValueError``."""
        if not isinstance(data, dict):
            raise ValueError("Stored session must be an object")
        username = data.get("username")
        role = data.get("role", "")
        if not isinstance(username, str) or not username:
            raise ValueError("Stored session has no username")
        if not isinstance(role, str):
            raise ValueError("Stored session role must be a string")
        return cls(username=username, role=role)
