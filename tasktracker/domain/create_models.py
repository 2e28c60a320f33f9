"""Pydantic models for creating records.

Missing required fields default to "" and are validated anyway, so an absent
title and a blank title fail with the same message.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tasktracker.domain.user import is_valid_email


def clean_title(v: Any) -> Any:
    """Trim a task title, rejecting None and blank values."""
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError("Task title cannot be empty")
    return str(v).strip() if isinstance(v, str) else v


def require_present(v: Any, label: str) -> Any:
    """Reject None and blank values, normalizing str enums to their value."""
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError(f"Task {label} is required")
    return str(v) if isinstance(v, str) else v


def clean_description(v: Any) -> Any:
    return "" if v is None else v


def clean_assignee(v: Any) -> Any:
    """Blank assignee means unassigned."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


def clean_name(v: Any) -> Any:
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError("User name cannot be empty")
    return v.strip() if isinstance(v, str) else v


def clean_email(v: Any) -> Any:
    """Trim an email and check its shape. Uniqueness is the repository's job."""
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError("User email cannot be empty")
    if not isinstance(v, str):
        return v
    v = v.strip()
    if not is_valid_email(v):
        raise ValueError("Invalid email format")
    return v


class TaskCreate(BaseModel):
    """Pydantic model for creating a task record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: str = Field(default="", validate_default=True, description="Task title")
    description: str = Field(default="", description="Detailed task description")
    category: str = Field(default="", validate_default=True, description="Task category")
    status: str = Field(default="", validate_default=True, description="Task status")
    assigned_to: str | None = Field(default=None, description="Assigned user ID")

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


class UserCreate(BaseModel):
    """Pydantic model for creating a user record. The id is never caller-supplied."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="", validate_default=True, description="Display name of the user")
    email: str = Field(default="", validate_default=True, description="Email address")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        return clean_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> Any:
        return clean_email(v)
