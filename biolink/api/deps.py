import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from biolink.adapters.sqlite.repos import SQLiteLinkRepo, SQLiteProfileRepo, SQLiteUserRepo
from biolink.api.auth_utils import read_session_subject
from biolink.components.links import LinkService
from biolink.components.profiles import ProfileService
from biolink.domain.entities import Profile, User
from biolink.rules.loader import load_rules
from biolink.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.data_dir = Path(os.environ.get("BIOLINK_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "biolink.db")
        self.rules_path = Path(os.environ.get("BIOLINK_RULES_PATH", PROJECT_ROOT / "rules.yaml"))
        self.migrations_dir = Path(
            os.environ.get("BIOLINK_MIGRATIONS_DIR", PROJECT_ROOT / "migrations")
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_profile_repo(settings: Settings = Depends(get_settings)) -> SQLiteProfileRepo:
    return SQLiteProfileRepo(settings.db_path)


def get_link_repo(settings: Settings = Depends(get_settings)) -> SQLiteLinkRepo:
    return SQLiteLinkRepo(settings.db_path)


# --- Component Services ---
def get_profile_service(
    repo: SQLiteProfileRepo = Depends(get_profile_repo),
    rules: Rules = Depends(get_rules),
) -> ProfileService:
    """Get profile component service."""
    return ProfileService(repo=repo, rules=rules.profiles)


def get_link_service(
    repo: SQLiteLinkRepo = Depends(get_link_repo),
    rules: Rules = Depends(get_rules),
) -> LinkService:
    """Get link component service."""
    return LinkService(repo=repo, rules=rules.links)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User:
    # Cookie (HttpOnly) wins over the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ")[1]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = read_session_subject(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = user_repo.get_by_id(UUID(user_id))
    except ValueError:
        user = None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def get_current_profile(
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """The caller's own profile; 404 until one has been created."""
    profile = service.get_by_user(current_user.id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
