"""
ProfileService - One public profile per user.

Username uniqueness is checked before writing; the UNIQUE constraint in
storage is the authoritative signal when two writers race.
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import urlparse
from uuid import UUID

from biolink.domain.entities import Profile
from biolink.domain.errors import DuplicateKeyError
from biolink.rules.models import ProfileRules

from .models import UPDATABLE_FIELDS, ProfileValidationError
from .ports import ProfileRepoPort

logger = logging.getLogger(__name__)


def _username_taken() -> ProfileValidationError:
    return ProfileValidationError(
        code="username_taken",
        message="Username already taken",
        field="username",
    )


def validate_profile_data(
    data: dict[str, Any],
    rules: ProfileRules | None = None,
) -> list[ProfileValidationError]:
    """Validate the profile fields present in data."""
    rules = rules or ProfileRules()
    errors: list[ProfileValidationError] = []

    if "username" in data:
        username = data["username"] or ""
        if not username:
            errors.append(
                ProfileValidationError(
                    code="username_required",
                    message="Username is required",
                    field="username",
                )
            )
        elif not (rules.username.min <= len(username) <= rules.username.max):
            errors.append(
                ProfileValidationError(
                    code="username_invalid",
                    message=(
                        f"Username must be between {rules.username.min} and "
                        f"{rules.username.max} characters"
                    ),
                    field="username",
                )
            )
        elif not re.fullmatch(rules.username.pattern, username):
            errors.append(
                ProfileValidationError(
                    code="username_invalid",
                    message="Username may only contain letters, digits, '.', '_' and '-'",
                    field="username",
                )
            )

    display_name = data.get("display_name")
    if display_name and len(display_name) > rules.display_name_max:
        errors.append(
            ProfileValidationError(
                code="display_name_too_long",
                message=f"Display name must be {rules.display_name_max} characters or less",
                field="display_name",
            )
        )

    bio = data.get("bio")
    if bio and len(bio) > rules.bio_max:
        errors.append(
            ProfileValidationError(
                code="bio_too_long",
                message=f"Bio must be {rules.bio_max} characters or less",
                field="bio",
            )
        )

    if "theme" in data and data["theme"] not in rules.theme_values:
        errors.append(
            ProfileValidationError(
                code="theme_invalid",
                message=f"Theme must be one of: {', '.join(rules.theme_values)}",
                field="theme",
            )
        )

    if "show_username" in data and not isinstance(data["show_username"], bool):
        errors.append(
            ProfileValidationError(
                code="show_username_invalid",
                message="showUsername must be true or false",
                field="show_username",
            )
        )

    avatar_url = data.get("avatar_url")
    if avatar_url:
        parsed = urlparse(avatar_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(
                ProfileValidationError(
                    code="avatar_url_invalid",
                    message="Avatar URL must be an http(s) URL",
                    field="avatar_url",
                )
            )

    return errors


class ProfileService:
    """
    Profile service.

    Each user owns at most one profile; usernames are globally unique and
    case-sensitive as stored.
    """

    def __init__(self, repo: ProfileRepoPort, rules: ProfileRules | None = None) -> None:
        self._repo = repo
        self._rules = rules or ProfileRules()

    def get_by_user(self, user_id: UUID) -> Profile | None:
        return self._repo.get_by_user(user_id)

    def get_by_username(self, username: str) -> Profile | None:
        return self._repo.get_by_username(username)

    def create(
        self,
        user_id: UUID,
        fields: dict[str, Any],
    ) -> tuple[Profile | None, list[ProfileValidationError]]:
        """
        Create the user's profile.

        Returns:
            Tuple of (profile, errors). Profile is None on any failure.
        """
        errors = validate_profile_data(fields, self._rules)
        if errors:
            return None, errors

        if self._repo.get_by_user(user_id):
            return None, [
                ProfileValidationError(code="profile_exists", message="Profile already exists")
            ]

        if self._repo.get_by_username(fields["username"]):
            logger.warning("Username %r already taken", fields["username"])
            return None, [_username_taken()]

        profile = Profile(user_id=user_id, **fields)
        try:
            saved = self._repo.create(profile)
        except DuplicateKeyError as e:
            logger.warning("Concurrent profile insert rejected on %s.%s", e.table, e.field)
            if e.field == "username":
                return None, [_username_taken()]
            return None, [
                ProfileValidationError(code="profile_exists", message="Profile already exists")
            ]

        logger.info("Created profile %s (%s) for user %s", saved.id, saved.username, user_id)
        return saved, []

    def update(
        self,
        user_id: UUID,
        changes: dict[str, Any],
    ) -> tuple[Profile | None, list[ProfileValidationError]]:
        """
        Apply a partial change set to the user's profile.

        Returns:
            Tuple of (profile, errors).
        """
        profile = self._repo.get_by_user(user_id)
        if not profile:
            return None, [
                ProfileValidationError(code="profile_not_found", message="Profile not found")
            ]

        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        errors = validate_profile_data(changes, self._rules)
        if errors:
            return None, errors

        new_username = changes.get("username")
        if new_username and new_username != profile.username:
            existing = self._repo.get_by_username(new_username)
            if existing and existing.user_id != user_id:
                return None, [_username_taken()]

        try:
            saved = self._repo.update(profile.model_copy(update=changes))
        except DuplicateKeyError:
            return None, [_username_taken()]

        if saved is None:
            return None, [
                ProfileValidationError(code="profile_not_found", message="Profile not found")
            ]
        return saved, []
