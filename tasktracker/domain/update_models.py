"""Partial update models.

Only explicitly supplied fields are validated and applied; model_fields_set
tells an absent field apart from one supplied with an empty value.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from tasktracker.domain.create_models import (
    clean_assignee,
    clean_description,
    clean_email,
    clean_name,
    clean_title,
    require_present,
)


class TaskUpdate(BaseModel):
    """Update payload for a task. id and createdAt are not updatable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: str | None = None
    description: str | None = None
    category: str | None = None
    status: str | None = None
    assigned_to: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> Any:
        return clean_title(v)

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> Any:
        return clean_description(v)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v: Any) -> Any:
        return require_present(v, "category")

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        return require_present(v, "status")

    @field_validator("assigned_to", mode="before")
    @classmethod
    def validate_assigned_to(cls, v: Any) -> Any:
        return clean_assignee(v)

    def changes(self) -> dict[str, Any]:
        """Supplied fields only, keyed by field name."""
        return self.model_dump(include=self.model_fields_set)


class UserUpdate(BaseModel):
    """Update payload for a user. The id is not updatable."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    email: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        return clean_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> Any:
        return clean_email(v)

    def changes(self) -> dict[str, Any]:
        """Supplied fields only, keyed by field name."""
        return self.model_dump(include=self.model_fields_set)
