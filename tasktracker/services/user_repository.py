"""User repository: CRUD with case-insensitive email uniqueness."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from tasktracker.core.config import constants
from tasktracker.core.errors import DUPLICATE_EMAIL_MESSAGE, NotFoundError, ValidationError
from tasktracker.core.logging import log_with_context, span
from tasktracker.domain.create_models import UserCreate
from tasktracker.domain.update_models import UserUpdate
from tasktracker.domain.user import User
from tasktracker.services.repository import EntityRepository, parse_payload


logger = logging.getLogger(__name__)


def id_number(user_id: str) -> int | None:
    """Numeric part of a user id ("user12" -> 12), None when it has no digits."""
    digits = re.sub(r"\D", "", user_id)
    return int(digits) if digits else None


class UserRepository(EntityRepository[User, str]):
    """User collection with ids of the form ``user<N>``."""

    collection = constants.USERS_COLLECTION
    entity_type = User

    def _generate_id(self) -> str:
        numbers = [n for n in (id_number(user.id) for user in self._items) if n is not None]
        return f"{constants.USER_ID_PREFIX}{max(numbers, default=0) + 1}"

    def _find_email_owner(self, email: str, *, exclude_id: str | None = None) -> User | None:
        wanted = email.lower()
        for user in self._items:
            if user.id != exclude_id and user.email.lower() == wanted:
                return user
        return None

    async def add(self, data: UserCreate | Mapping[str, Any]) -> User:
        """Create a user with a generated id and persist it.

        Validation happens before id generation, so a rejected add never
        consumes an id.

        Raises:
            ValidationError: If name/email is blank, the email is malformed, or
                another user already has this email
            StorageError: If persisting fails
        """
        with span("user_repository.add"):
            payload = parse_payload(UserCreate, data)

            async with self._lock:
                self._require_initialized()
                if self._find_email_owner(payload.email) is not None:
                    logger.warning("Rejected duplicate email", extra={"collection": self.collection})
                    raise ValidationError(DUPLICATE_EMAIL_MESSAGE)

                user = User(id=self._generate_id(), name=payload.name, email=payload.email)
                self._items.append(user)
                self._persist()

            log_with_context(logger, "info", "Added user", collection=self.collection, record_id=user.id)
            return user

    async def get_user(self, user_id: str) -> User | None:
        """Alias of get_by_id."""
        return await self.get_by_id(user_id)

    async def find_by_email(self, email: str) -> User | None:
        """Return the user owning ``email`` (case-insensitive), or None."""
        self._require_initialized()
        return self._find_email_owner(email.strip())

    async def update(self, user_id: str, changes: UserUpdate | Mapping[str, Any]) -> User:
        """Apply the supplied name/email to a user and persist.

        A supplied email must be unique among the other users; re-submitting
        the user's own email is allowed.

        Raises:
            NotFoundError: If no user has this id
            ValidationError: If a supplied field is invalid or the email is taken
            StorageError: If persisting fails
        """
        with span("user_repository.update"):
            async with self._lock:
                self._require_initialized()
                index = self._index_of(user_id)
                if index is None:
                    msg = f"User with ID {user_id} not found"
                    raise NotFoundError(msg)

                payload = parse_payload(UserUpdate, changes)
                fields = payload.changes()
                if "email" in fields and self._find_email_owner(fields["email"], exclude_id=user_id) is not None:
                    logger.warning(
                        "Rejected duplicate email", extra={"collection": self.collection, "record_id": user_id}
                    )
                    raise ValidationError(DUPLICATE_EMAIL_MESSAGE)

                user = self._items[index].model_copy(update=fields)
                self._items[index] = user
                self._persist()

            log_with_context(
                logger, "info", "Updated user", collection=self.collection, record_id=user_id, fields=sorted(fields)
            )
            return user
