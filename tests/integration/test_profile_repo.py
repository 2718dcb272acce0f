from uuid import uuid4

import pytest

from biolink.adapters.sqlite.repos import SQLiteProfileRepo, SQLiteUserRepo
from biolink.domain.entities import Profile, User
from biolink.domain.errors import DuplicateKeyError


@pytest.fixture
def users(db_path):
    return SQLiteUserRepo(db_path)


@pytest.fixture
def repo(db_path):
    return SQLiteProfileRepo(db_path)


def _user(users: SQLiteUserRepo, email: str) -> User:
    return users.save(User(email=email, password_hash="hash"))


def test_create_and_lookup(repo, users):
    user = _user(users, "alice@example.com")

    saved = repo.create(Profile(user_id=user.id, username="alice", bio="hello"))

    assert saved.id is not None
    assert repo.get_by_user(user.id) == saved
    assert repo.get_by_username("alice") == saved
    assert repo.get_by_username("ALICE") is None


def test_duplicate_username_fails_loudly(repo, users):
    first = _user(users, "a@example.com")
    second = _user(users, "b@example.com")
    repo.create(Profile(user_id=first.id, username="alice"))

    with pytest.raises(DuplicateKeyError) as exc_info:
        repo.create(Profile(user_id=second.id, username="alice"))

    assert exc_info.value.field == "username"
    assert repo.get_by_user(second.id) is None


def test_one_profile_per_user(repo, users):
    user = _user(users, "a@example.com")
    repo.create(Profile(user_id=user.id, username="alice"))

    with pytest.raises(DuplicateKeyError) as exc_info:
        repo.create(Profile(user_id=user.id, username="other"))

    assert exc_info.value.field == "user_id"


def test_update_overwrites_fields(repo, users):
    user = _user(users, "a@example.com")
    saved = repo.create(Profile(user_id=user.id, username="alice"))

    updated = repo.update(saved.model_copy(update={"theme": "dark", "show_username": False}))

    assert updated is not None
    assert updated.theme == "dark"
    assert updated.show_username is False
    assert updated.id == saved.id


def test_update_missing_profile(repo):
    assert repo.update(Profile(user_id=uuid4(), username="ghost")) is None


def test_user_email_is_unique(users):
    _user(users, "a@example.com")

    with pytest.raises(DuplicateKeyError) as exc_info:
        _user(users, "a@example.com")

    assert exc_info.value.field == "email"


def test_user_roundtrip(users):
    user = _user(users, "a@example.com")

    assert users.get_by_id(user.id) == user
    assert users.get_by_email("a@example.com") == user
