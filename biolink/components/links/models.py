"""
Links component - Data models.

Inputs always carry the caller's profile_id: a link is only reachable
through the profile that owns it.
"""

from __future__ import annotations

from dataclasses import dataclass

from biolink.domain.entities import Link

# --- Validation Errors ---


@dataclass(frozen=True)
class LinkValidationError:
    """Link validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateLinkInput:
    """Input for creating a link. Position is assigned by storage."""

    profile_id: int
    title: str
    url: str
    icon: str | None = None
    is_visible: bool = True


@dataclass(frozen=True)
class UpdateLinkInput:
    """Input for updating a link. None means unchanged; icon="" clears the icon."""

    profile_id: int
    link_id: int
    title: str | None = None
    url: str | None = None
    icon: str | None = None
    is_visible: bool | None = None


@dataclass(frozen=True)
class DeleteLinkInput:
    """Input for deleting a link."""

    profile_id: int
    link_id: int


@dataclass(frozen=True)
class GetLinkInput:
    """Input for getting a link."""

    profile_id: int
    link_id: int


@dataclass(frozen=True)
class ListLinksInput:
    """Input for listing a profile's links."""

    profile_id: int
    visible_only: bool = False


@dataclass(frozen=True)
class ReorderLinksInput:
    """Input for reordering: the full list of the profile's link ids, new order."""

    profile_id: int
    ordered_ids: tuple[int, ...]


# --- Output Models ---


@dataclass(frozen=True)
class LinkOperationOutput:
    """Output from link operation."""

    link: Link | None
    errors: tuple[LinkValidationError, ...]
    success: bool


@dataclass(frozen=True)
class LinkListOutput:
    """Output from list and reorder operations."""

    links: tuple[Link, ...]
    total: int
    errors: tuple[LinkValidationError, ...] = ()
    success: bool = True
