"""User domain models."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Basic local-part "@" domain-with-dot shape
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    """Return True if the email matches the basic address shape."""
    return bool(EMAIL_PATTERN.match(email))


class User(BaseModel):
    """User value object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Repository-assigned ID of the form user<N>")
    name: str = Field(..., min_length=1, description="Display name of the user")
    email: str = Field(..., min_length=1, description="Email address, unique case-insensitively")

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "User":
        """Build a user from a raw on-disk record."""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the raw on-disk record."""
        return self.model_dump(mode="json")

    def summary(self) -> str:
        """One-line human-readable rendering."""
        return f"{self.name} ({self.email})"

    def __str__(self) -> str:
        return self.summary()
