"""
Unit tests for UserRepository.

Tests user and session data access operations including:
- Registration with unique email enforcement
- Session create-or-replace semantics
- Lookups by email and user id
- Cascading user deletion
- Preference replacement
"""

from unittest.mock import AsyncMock, Mock

import pytest
from pymongo.errors import DuplicateKeyError

from mflix.core.exceptions import DuplicateUserError, IncorrectOperationError
from mflix.database.repositories.user_repository import UserRepository
from mflix.models.user import Session, User

# ===== Fixtures =====


@pytest.fixture
def mock_users():
    """Mock users collection"""
    collection = Mock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock(
        return_value=Mock(acknowledged=True, deleted_count=1)
    )
    collection.create_index = AsyncMock()
    collection.with_options = Mock(return_value=collection)
    return collection


@pytest.fixture
def mock_sessions():
    """Mock sessions collection"""
    collection = Mock()
    collection.find_one = AsyncMock(return_value=None)
    collection.replace_one = AsyncMock()
    collection.delete_many = AsyncMock(
        return_value=Mock(acknowledged=True, deleted_count=2)
    )
    collection.create_index = AsyncMock()
    return collection


@pytest.fixture
def repository(mock_users, mock_sessions):
    """Create UserRepository instance"""
    return UserRepository(mock_users, mock_sessions)


@pytest.fixture
def sample_user():
    """Sample user object"""
    return User(
        name="Ned Stark",
        email="sean_bean@gameofthron.es",
        hashedpw="$2b$12$hashed_password_here",
        preferences={"favourite_cast": "Sean Bean"},
    )


# ===== add_user Tests =====


class TestAddUser:
    """Test user registration"""

    @pytest.mark.asyncio
    async def test_add_user_inserts_new_user(self, repository, mock_users, sample_user):
        """Test inserting a user whose email is free"""
        # Act
        result = await repository.add_user(sample_user)

        # Assert
        assert result is True
        mock_users.find_one.assert_called_once_with(
            {"email": "sean_bean@gameofthron.es"}
        )
        inserted = mock_users.insert_one.call_args[0][0]
        assert inserted["email"] == "sean_bean@gameofthron.es"
        assert inserted["password"] == "$2b$12$hashed_password_here"
        assert inserted["preferences"] == {"favourite_cast": "Sean Bean"}

    @pytest.mark.asyncio
    async def test_add_user_uses_majority_write_concern(
        self, repository, mock_users, sample_user
    ):
        """Test that the insert is acknowledged by a majority"""
        # Act
        await repository.add_user(sample_user)

        # Assert
        write_concern = mock_users.with_options.call_args.kwargs["write_concern"]
        assert write_concern.document == {"w": "majority"}

    @pytest.mark.asyncio
    async def test_add_user_existing_email_raises(
        self, repository, mock_users, sample_user
    ):
        """Test that a taken email is rejected without inserting"""
        # Arrange
        mock_users.find_one.return_value = {
            "_id": "mongo_id",
            "name": "Other",
            "email": "sean_bean@gameofthron.es",
        }

        # Act & Assert
        with pytest.raises(DuplicateUserError) as exc_info:
            await repository.add_user(sample_user)

        assert exc_info.value.status_code == 409
        assert exc_info.value.context == {"email": "sean_bean@gameofthron.es"}
        mock_users.insert_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_user_concurrent_insert_raises_duplicate(
        self, repository, mock_users, sample_user
    ):
        """Test that a unique index violation is reported as a duplicate user"""
        # Arrange
        mock_users.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        # Act & Assert
        with pytest.raises(DuplicateUserError):
            await repository.add_user(sample_user)


# ===== Session Tests =====


class TestCreateUserSession:
    """Test session create-or-replace"""

    @pytest.mark.asyncio
    async def test_create_session_upserts_by_user_id(self, repository, mock_sessions):
        """Test that the session replaces any previous one for the user"""
        # Act
        result = await repository.create_user_session("ned@stark.com", "jwt_token")

        # Assert
        assert result is True
        mock_sessions.replace_one.assert_called_once_with(
            {"user_id": "ned@stark.com"},
            {"user_id": "ned@stark.com", "jwt": "jwt_token"},
            upsert=True,
        )

    @pytest.mark.asyncio
    async def test_create_session_identical_session_returns_false(
        self, repository, mock_sessions
    ):
        """Test that an identical existing session is left untouched"""
        # Arrange
        mock_sessions.find_one.return_value = {
            "_id": "mongo_id",
            "user_id": "ned@stark.com",
            "jwt": "jwt_token",
        }

        # Act
        result = await repository.create_user_session("ned@stark.com", "jwt_token")

        # Assert
        assert result is False
        mock_sessions.find_one.assert_called_once_with(
            {"user_id": "ned@stark.com", "jwt": "jwt_token"}
        )
        mock_sessions.replace_one.assert_not_called()


class TestGetUserSession:
    """Test session retrieval"""

    @pytest.mark.asyncio
    async def test_get_user_session_found(self, repository, mock_sessions):
        """Test retrieving a stored session"""
        # Arrange
        mock_sessions.find_one.return_value = {
            "_id": "mongo_id",
            "user_id": "ned@stark.com",
            "jwt": "jwt_token",
        }

        # Act
        result = await repository.get_user_session("ned@stark.com")

        # Assert
        assert result == Session(user_id="ned@stark.com", jwt="jwt_token")
        mock_sessions.find_one.assert_called_once_with({"user_id": "ned@stark.com"})

    @pytest.mark.asyncio
    async def test_get_user_session_missing(self, repository):
        """Test that a missing session returns None"""
        # Act
        result = await repository.get_user_session("nobody@example.com")

        # Assert
        assert result is None


# ===== get_user Tests =====


class TestGetUser:
    """Test user retrieval by email"""

    @pytest.mark.asyncio
    async def test_get_user_existing(self, repository, mock_users):
        """Test retrieving a user maps the stored password to hashedpw"""
        # Arrange
        mock_users.find_one.return_value = {
            "_id": "mongo_id",
            "name": "Ned Stark",
            "email": "sean_bean@gameofthron.es",
            "password": "$2b$12$hash",
        }

        # Act
        result = await repository.get_user("sean_bean@gameofthron.es")

        # Assert
        assert result is not None
        assert result.name == "Ned Stark"
        assert result.hashedpw == "$2b$12$hash"
        assert result.preferences is None

    @pytest.mark.asyncio
    async def test_get_user_nonexistent(self, repository):
        """Test retrieving non-existent user returns None"""
        # Act
        result = await repository.get_user("nobody@example.com")

        # Assert
        assert result is None


# ===== Delete Tests =====


class TestDelete:
    """Test session and user deletion"""

    @pytest.mark.asyncio
    async def test_delete_user_sessions(self, repository, mock_sessions):
        """Test deleting every session of a user"""
        # Act
        result = await repository.delete_user_sessions("ned@stark.com")

        # Assert
        assert result is True
        mock_sessions.delete_many.assert_called_once_with({"user_id": "ned@stark.com"})

    @pytest.mark.asyncio
    async def test_delete_user_removes_sessions_first(
        self, repository, mock_users, mock_sessions
    ):
        """Test that deleting a user cascades to its sessions before the user"""
        # Arrange
        calls = []
        mock_sessions.delete_many.side_effect = lambda *a, **k: (
            calls.append("sessions") or Mock(acknowledged=True, deleted_count=1)
        )
        mock_users.delete_one.side_effect = lambda *a, **k: (
            calls.append("user") or Mock(acknowledged=True, deleted_count=1)
        )

        # Act
        result = await repository.delete_user("ned@stark.com")

        # Assert
        assert result is True
        assert calls == ["sessions", "user"]
        mock_sessions.delete_many.assert_called_once_with({"user_id": "ned@stark.com"})
        mock_users.delete_one.assert_called_once_with({"email": "ned@stark.com"})

    @pytest.mark.asyncio
    async def test_delete_user_unacknowledged(self, repository, mock_users):
        """Test that an unacknowledged delete is reported as False"""
        # Arrange
        mock_users.delete_one.return_value = Mock(acknowledged=False, deleted_count=0)

        # Act
        result = await repository.delete_user("ned@stark.com")

        # Assert
        assert result is False


# ===== Preferences Tests =====


class TestUpdateUserPreferences:
    """Test preference replacement"""

    @pytest.mark.asyncio
    async def test_update_preferences_replaces_map(self, repository, mock_users):
        """Test that the whole preferences map is set"""
        # Arrange
        mock_users.find_one.return_value = {"name": "Ned", "email": "ned@stark.com"}

        # Act
        result = await repository.update_user_preferences(
            "ned@stark.com", {"genre": "drama"}
        )

        # Assert
        assert result is True
        mock_users.update_one.assert_called_once_with(
            {"email": "ned@stark.com"},
            {"$set": {"preferences": {"genre": "drama"}}},
        )

    @pytest.mark.asyncio
    async def test_update_preferences_unknown_user(self, repository, mock_users):
        """Test that an unknown user is reported as False"""
        # Act
        result = await repository.update_user_preferences(
            "nobody@example.com", {"genre": "drama"}
        )

        # Assert
        assert result is False
        mock_users.update_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_preferences_none_raises(self, repository, mock_users):
        """Test that null preferences are rejected"""
        # Arrange
        mock_users.find_one.return_value = {"name": "Ned", "email": "ned@stark.com"}

        # Act & Assert
        with pytest.raises(IncorrectOperationError):
            await repository.update_user_preferences("ned@stark.com", None)

        mock_users.update_one.assert_not_called()


# ===== Index Tests =====


class TestEnsureIndexes:
    """Test index creation"""

    @pytest.mark.asyncio
    async def test_ensure_indexes(self, repository, mock_users, mock_sessions):
        """Test unique email index and session user_id index"""
        # Act
        await repository.ensure_indexes()

        # Assert
        mock_users.create_index.assert_called_once_with("email", unique=True)
        mock_sessions.create_index.assert_called_once_with("user_id")

    @pytest.mark.asyncio
    async def test_ensure_indexes_tolerates_duplicate_emails(
        self, repository, mock_users, mock_sessions
    ):
        """Test that a failed unique index does not abort index setup"""
        # Arrange
        mock_users.create_index.side_effect = Exception("E11000 duplicate key")

        # Act
        await repository.ensure_indexes()

        # Assert
        mock_sessions.create_index.assert_called_once_with("user_id")
