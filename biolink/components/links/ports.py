"""
Links component - Port interfaces.
"""

from __future__ import annotations

from typing import Any, Protocol

from biolink.domain.entities import Link


class LinkRepoPort(Protocol):
    """Repository interface for links, scoped by owning profile."""

    def list_for_profile(self, profile_id: int) -> list[Link]:
        """List a profile's links ordered by position."""
        ...

    def get(self, profile_id: int, link_id: int) -> Link | None:
        """Get a link if it exists and belongs to the profile."""
        ...

    def count_for_profile(self, profile_id: int) -> int:
        """Number of links the profile has."""
        ...

    def create(self, link: Link) -> Link:
        """Append link at position == current count, atomically."""
        ...

    def update(self, profile_id: int, link_id: int, changes: dict[str, Any]) -> Link | None:
        """Write only the changed title/url/icon/visibility columns. None if not found."""
        ...

    def delete(self, profile_id: int, link_id: int) -> bool:
        """Delete and compact positions. False if not found."""
        ...

    def reorder(self, profile_id: int, ordered_ids: list[int]) -> list[Link]:
        """Assign position i to ordered_ids[i] atomically.

        Raises OrderMismatchError if ordered_ids is not the profile's full set.
        """
        ...
