"""
Profiles component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from biolink.domain.entities import Profile


class ProfileRepoPort(Protocol):
    """Repository interface for profiles."""

    def create(self, profile: Profile) -> Profile:
        """Insert profile. Raises DuplicateKeyError on username/user clash."""
        ...

    def update(self, profile: Profile) -> Profile | None:
        """Overwrite profile owned by profile.user_id. None if absent."""
        ...

    def get_by_user(self, user_id: UUID) -> Profile | None:
        """Exact-match lookup by owning user."""
        ...

    def get_by_username(self, username: str) -> Profile | None:
        """Exact, case-sensitive lookup by username."""
        ...
