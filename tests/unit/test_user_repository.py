"""Unit tests for UserRepository."""

import pytest

from tasktracker.core.errors import NotFoundError, StorageError, ValidationError
from tasktracker.services.user_repository import UserRepository, id_number
from tests.unit.helpers import read_collection_file


@pytest.fixture
async def ada(user_repo):
    return await user_repo.add({"name": "Ada Lovelace", "email": "ada@example.com"})


@pytest.mark.unit
class TestIdGeneration:
    """Tests for user<N> identifier assignment."""

    async def test_first_user_is_user1(self, user_repo):
        user = await user_repo.add({"name": "A", "email": "a@x.com"})

        assert user.id == "user1"

    async def test_ids_follow_highest_suffix(self, store):
        """Test the next suffix is max(existing) + 1."""
        store.save(
            "users",
            [
                {"id": "user2", "name": "B", "email": "b@x.com"},
                {"id": "user9", "name": "C", "email": "c@x.com"},
            ],
        )
        repo = UserRepository(store)
        await repo.initialize()

        user = await repo.add({"name": "D", "email": "d@x.com"})

        assert user.id == "user10"

    async def test_ids_without_digits_are_ignored(self, store):
        store.save(
            "users",
            [
                {"id": "admin", "name": "Root", "email": "root@x.com"},
                {"id": "user3", "name": "C", "email": "c@x.com"},
            ],
        )
        repo = UserRepository(store)
        await repo.initialize()

        user = await repo.add({"name": "D", "email": "d@x.com"})

        assert user.id == "user4"

    async def test_only_non_numeric_ids_start_at_one(self, store):
        store.save("users", [{"id": "admin", "name": "Root", "email": "root@x.com"}])
        repo = UserRepository(store)
        await repo.initialize()

        user = await repo.add({"name": "D", "email": "d@x.com"})

        assert user.id == "user1"

    async def test_rejected_add_does_not_consume_id(self, user_repo, ada):
        with pytest.raises(ValidationError):
            await user_repo.add({"name": "Copy", "email": "ADA@example.com"})

        user = await user_repo.add({"name": "Grace", "email": "grace@example.com"})

        assert user.id == "user2"

    @pytest.mark.parametrize(
        ("user_id", "expected"),
        [("user1", 1), ("user42", 42), ("admin", None), ("", None)],
    )
    def test_id_number(self, user_id, expected):
        assert id_number(user_id) == expected


@pytest.mark.unit
class TestAdd:
    """Tests for UserRepository.add."""

    async def test_add_success(self, user_repo, store):
        user = await user_repo.add({"name": "  Ada  ", "email": "  ada@example.com "})

        assert user.name == "Ada"
        assert user.email == "ada@example.com"
        assert read_collection_file(store, "users")["users"] == [
            {"id": "user1", "name": "Ada", "email": "ada@example.com"}
        ]

    async def test_add_then_get_user(self, user_repo, ada):
        assert await user_repo.get_user(ada.id) == ada
        assert await user_repo.get_by_id(ada.id) == ada

    async def test_duplicate_email_case_insensitive(self, user_repo):
        """Test an email differing only in case is a duplicate."""
        await user_repo.add({"name": "A", "email": "a@x.com"})

        with pytest.raises(ValidationError, match="already exists"):
            await user_repo.add({"name": "B", "email": "A@X.com"})

    async def test_duplicate_email_changes_nothing(self, user_repo, store, ada):
        before = store.path_for("users").read_bytes()

        with pytest.raises(ValidationError, match="already exists"):
            await user_repo.add({"name": "Imposter", "email": "Ada@Example.com"})

        assert await user_repo.count() == 1
        assert store.path_for("users").read_bytes() == before

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ({"name": "", "email": "a@x.com"}, "name cannot be empty"),
            ({"name": "   ", "email": "a@x.com"}, "name cannot be empty"),
            ({"email": "a@x.com"}, "name cannot be empty"),
            ({"name": "A", "email": ""}, "email cannot be empty"),
            ({"name": "A"}, "email cannot be empty"),
            ({"name": "A", "email": "not-an-email"}, "Invalid email format"),
            ({"name": "A", "email": "a@nodot"}, "Invalid email format"),
            ({"name": "A", "email": "a b@x.com"}, "Invalid email format"),
            ({"id": "user7", "name": "A", "email": "a@x.com"}, "id"),
        ],
    )
    async def test_add_invalid(self, user_repo, store, data, message):
        with pytest.raises(ValidationError, match=message):
            await user_repo.add(data)

        assert await user_repo.get_all() == []
        assert not store.path_for("users").exists()


@pytest.mark.unit
class TestUpdate:
    """Tests for UserRepository.update."""

    async def test_update_name_only(self, user_repo, ada):
        updated = await user_repo.update(ada.id, {"name": " Countess "})

        assert updated.name == "Countess"
        assert updated.email == ada.email

    async def test_update_email(self, user_repo, store, ada):
        updated = await user_repo.update(ada.id, {"email": "countess@example.org"})

        assert updated.email == "countess@example.org"
        assert read_collection_file(store, "users")["users"][0]["email"] == "countess@example.org"

    async def test_resubmitting_own_email_is_allowed(self, user_repo, ada):
        """Test a user's own email does not count as a duplicate."""
        updated = await user_repo.update(ada.id, {"email": "ADA@example.com"})

        assert updated.email == "ADA@example.com"

    async def test_email_taken_by_other_user(self, user_repo, ada):
        grace = await user_repo.add({"name": "Grace", "email": "grace@example.com"})

        with pytest.raises(ValidationError, match="already exists"):
            await user_repo.update(grace.id, {"email": "Ada@Example.COM"})

        assert (await user_repo.get_by_id(grace.id)).email == "grace@example.com"

    @pytest.mark.parametrize(
        ("changes", "message"),
        [
            ({"email": ""}, "email cannot be empty"),
            ({"email": "   "}, "email cannot be empty"),
            ({"email": "broken"}, "Invalid email format"),
            ({"name": ""}, "name cannot be empty"),
            ({"name": "New", "email": ""}, "email cannot be empty"),
            ({"id": "user5"}, "id"),
        ],
    )
    async def test_update_invalid(self, user_repo, store, ada, changes, message):
        """Test no field changes when any supplied field is invalid."""
        before = store.path_for("users").read_bytes()

        with pytest.raises(ValidationError, match=message):
            await user_repo.update(ada.id, changes)

        assert await user_repo.get_by_id(ada.id) == ada
        assert store.path_for("users").read_bytes() == before

    async def test_update_missing_raises(self, user_repo):
        with pytest.raises(NotFoundError, match="User with ID user99 not found"):
            await user_repo.update("user99", {"name": "Nobody"})


@pytest.mark.unit
class TestDeleteAndLookup:
    """Tests for delete, get_user and find_by_email."""

    async def test_get_missing_user_returns_none(self, user_repo):
        assert await user_repo.get_user("user404") is None

    async def test_delete_user(self, user_repo, ada):
        assert await user_repo.delete(ada.id) is True
        assert await user_repo.get_user(ada.id) is None
        assert await user_repo.delete(ada.id) is False

    async def test_deleted_email_can_be_reused(self, user_repo, ada):
        await user_repo.delete(ada.id)

        user = await user_repo.add({"name": "Ada again", "email": "ada@example.com"})

        assert user.email == "ada@example.com"

    async def test_delete_does_not_touch_tasks(self, user_repo, task_repo, ada):
        """Test assignments are weak references: deleting a user keeps their tasks."""
        task = await task_repo.add({"title": "T", "category": "work", "status": "pending", "assigned_to": ada.id})

        await user_repo.delete(ada.id)

        assert (await task_repo.get_by_id(task.id)).assigned_to == ada.id

    async def test_find_by_email(self, user_repo, ada):
        assert await user_repo.find_by_email(" ADA@example.com ") == ada
        assert await user_repo.find_by_email("nobody@example.com") is None


@pytest.mark.unit
class TestSaveFailure:
    """Tests for user mutations whose save fails after memory has changed."""

    async def test_add_raises_and_keeps_user_in_memory(self, user_repo, store, ada, break_saves):
        before = store.path_for("users").read_bytes()
        break_saves()

        with pytest.raises(StorageError, match="Failed to save users"):
            await user_repo.add({"name": "Grace", "email": "grace@example.com"})

        grace = await user_repo.find_by_email("grace@example.com")
        assert grace is not None
        assert grace.id == "user2"
        assert await user_repo.count() == 2
        assert store.path_for("users").read_bytes() == before

    async def test_update_raises_and_keeps_change_in_memory(self, user_repo, store, ada, break_saves):
        break_saves()

        with pytest.raises(StorageError, match="Failed to save users"):
            await user_repo.update(ada.id, {"name": "Countess"})

        assert (await user_repo.get_user(ada.id)).name == "Countess"
        assert read_collection_file(store, "users")["users"][0]["name"] == "Ada Lovelace"
