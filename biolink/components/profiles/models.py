"""
Profiles component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from biolink.domain.entities import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BUTTON_COLOR,
    DEFAULT_BUTTON_TEXT_COLOR,
    DEFAULT_FONT,
    DEFAULT_TEXT_COLOR,
    DEFAULT_THEME,
    Profile,
)

# Fields a caller may change through update; user_id and id are fixed.
UPDATABLE_FIELDS = frozenset(
    {
        "username",
        "display_name",
        "avatar_url",
        "show_username",
        "bio",
        "theme",
        "background_color",
        "text_color",
        "button_color",
        "button_text_color",
        "font",
    }
)


@dataclass(frozen=True)
class ProfileValidationError:
    """Profile validation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class CreateProfileInput:
    """Input for creating the caller's profile."""

    user_id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    show_username: bool = True
    bio: str | None = None
    theme: str = DEFAULT_THEME
    background_color: str | None = DEFAULT_BACKGROUND_COLOR
    text_color: str | None = DEFAULT_TEXT_COLOR
    button_color: str | None = DEFAULT_BUTTON_COLOR
    button_text_color: str | None = DEFAULT_BUTTON_TEXT_COLOR
    font: str | None = DEFAULT_FONT


@dataclass(frozen=True)
class UpdateProfileInput:
    """Input for a partial profile update; only keys present in changes apply."""

    user_id: UUID
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProfileOperationOutput:
    """Output from profile operation."""

    profile: Profile | None
    errors: tuple[ProfileValidationError, ...]
    success: bool
