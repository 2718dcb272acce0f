from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Defaults ---
DEFAULT_THEME = "default"
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_BUTTON_COLOR = "#000000"
DEFAULT_BUTTON_TEXT_COLOR = "#ffffff"
DEFAULT_FONT = "Inter"


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- User & Auth ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow)

# --- Profiles ---

class Profile(BaseModel):
    id: int | None = None  # Assigned by storage
    user_id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    show_username: bool = True
    bio: str | None = None

    # Theme
    theme: str = DEFAULT_THEME
    background_color: str | None = DEFAULT_BACKGROUND_COLOR
    text_color: str | None = DEFAULT_TEXT_COLOR
    button_color: str | None = DEFAULT_BUTTON_COLOR
    button_text_color: str | None = DEFAULT_BUTTON_TEXT_COLOR
    font: str | None = DEFAULT_FONT

# --- Links ---

class Link(BaseModel):
    id: int | None = None  # Assigned by storage
    profile_id: int
    title: str
    url: str
    icon: str | None = None  # lucide icon name
    position: int = 0  # Assigned by storage on create, changed only by reorder
    is_visible: bool = True
