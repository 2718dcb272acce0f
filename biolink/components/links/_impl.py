"""
LinkService - Ordered link management for a profile page.

Handles link creation, updates, deletion, reordering and validation.

Functional Core - validation is pure; ordering is delegated to the repo,
which owns position assignment.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from biolink.domain.entities import Link
from biolink.domain.errors import OrderMismatchError
from biolink.rules.models import LinkRules

from .models import LinkValidationError
from .ports import LinkRepoPort

logger = logging.getLogger(__name__)

# --- Validation Functions ---


def validate_link_data(
    title: str | None = None,
    url: str | None = None,
    icon: str | None = None,
    rules: LinkRules | None = None,
) -> list[LinkValidationError]:
    """Validate link data. Fields passed as None are not checked."""
    rules = rules or LinkRules()
    errors: list[LinkValidationError] = []

    if title is not None:
        stripped = title.strip()
        if not stripped or len(stripped) < rules.title.min:
            errors.append(
                LinkValidationError(
                    code="title_required",
                    message="Title is required",
                    field="title",
                )
            )
        elif len(stripped) > rules.title.max:
            errors.append(
                LinkValidationError(
                    code="title_too_long",
                    message=f"Title must be {rules.title.max} characters or less",
                    field="title",
                )
            )

    if url is not None:
        stripped = url.strip()
        if not stripped:
            errors.append(
                LinkValidationError(
                    code="url_required",
                    message="URL is required",
                    field="url",
                )
            )
        elif len(stripped) > rules.url_max_length:
            errors.append(
                LinkValidationError(
                    code="url_too_long",
                    message=f"URL must be {rules.url_max_length} characters or less",
                    field="url",
                )
            )
        else:
            parsed = urlparse(stripped)
            scheme = parsed.scheme.lower()
            if scheme not in rules.allowed_link_protocols:
                allowed = ", ".join(rules.allowed_link_protocols)
                errors.append(
                    LinkValidationError(
                        code="url_invalid_scheme",
                        message=f"URL scheme must be one of: {allowed}",
                        field="url",
                    )
                )
            elif scheme in ("http", "https") and not parsed.netloc:
                errors.append(
                    LinkValidationError(
                        code="url_invalid",
                        message="URL must include a host",
                        field="url",
                    )
                )

    if icon is not None and len(icon.strip()) > rules.icon_max_length:
        errors.append(
            LinkValidationError(
                code="icon_too_long",
                message=f"Icon must be {rules.icon_max_length} characters or less",
                field="icon",
            )
        )

    return errors


def validate_order(ordered_ids: list[int]) -> list[LinkValidationError]:
    """Reject id lists with repeats before touching storage."""
    seen: set[int] = set()
    duplicates: list[int] = []
    for link_id in ordered_ids:
        if link_id in seen:
            duplicates.append(link_id)
        seen.add(link_id)

    if duplicates:
        return [
            LinkValidationError(
                code="reorder_ids_duplicate",
                message=f"Link ids appear more than once: {sorted(set(duplicates))}",
                field="ids",
            )
        ]
    return []


def _not_found(link_id: int) -> LinkValidationError:
    return LinkValidationError(
        code="link_not_found",
        message=f"Link with ID {link_id} not found",
    )


# --- Link Service ---


class LinkService:
    """
    Link service.

    Manages the ordered links of a profile. Every operation is scoped to a
    profile id, so a link owned by another profile is reported as not found.
    """

    def __init__(self, repo: LinkRepoPort, rules: LinkRules | None = None) -> None:
        """Initialize service."""
        self._repo = repo
        self._rules = rules or LinkRules()

    def get_all(self, profile_id: int) -> list[Link]:
        """Get a profile's links in position order."""
        return self._repo.list_for_profile(profile_id)

    def get_visible(self, profile_id: int) -> list[Link]:
        """Get the links shown on the public page, in position order."""
        return [link for link in self._repo.list_for_profile(profile_id) if link.is_visible]

    def get_by_id(self, profile_id: int, link_id: int) -> Link | None:
        """Get link by ID if the profile owns it."""
        return self._repo.get(profile_id, link_id)

    def create(
        self,
        profile_id: int,
        title: str,
        url: str,
        icon: str | None = None,
        is_visible: bool = True,
    ) -> tuple[Link | None, list[LinkValidationError]]:
        """
        Append a new link at the end of the profile's list.

        Returns:
            Tuple of (link, errors). Link is None if validation fails.
        """
        errors = validate_link_data(title=title, url=url, icon=icon, rules=self._rules)
        if errors:
            return None, errors

        if self._repo.count_for_profile(profile_id) >= self._rules.max_links_per_profile:
            return None, [
                LinkValidationError(
                    code="link_limit_reached",
                    message=(
                        f"A profile can have at most "
                        f"{self._rules.max_links_per_profile} links"
                    ),
                )
            ]

        link = Link(
            profile_id=profile_id,
            title=title.strip(),
            url=url.strip(),
            icon=icon.strip() if icon and icon.strip() else None,
            is_visible=is_visible,
        )

        saved = self._repo.create(link)
        logger.info(
            "Created link %s for profile %s at position %s", saved.id, profile_id, saved.position
        )
        return saved, []

    def update(
        self,
        profile_id: int,
        link_id: int,
        updates: dict[str, Any],
    ) -> tuple[Link | None, list[LinkValidationError]]:
        """
        Update title, url, icon or visibility of an existing link.

        Position is not updatable here; use reorder.

        Returns:
            Tuple of (link, errors). Link is None if not found or validation fails.
        """
        link = self.get_by_id(profile_id, link_id)
        if not link:
            return None, [_not_found(link_id)]

        errors = validate_link_data(
            title=updates.get("title"),
            url=updates.get("url"),
            icon=updates.get("icon"),
            rules=self._rules,
        )
        if errors:
            return None, errors

        changes: dict[str, Any] = {}
        if updates.get("title") is not None:
            changes["title"] = str(updates["title"]).strip()
        if updates.get("url") is not None:
            changes["url"] = str(updates["url"]).strip()
        if "icon" in updates:
            icon = updates["icon"]
            changes["icon"] = str(icon).strip() if icon and str(icon).strip() else None
        if updates.get("is_visible") is not None:
            changes["is_visible"] = bool(updates["is_visible"])

        saved = self._repo.update(profile_id, link_id, changes)
        if saved is None:
            # Deleted between read and write
            return None, [_not_found(link_id)]
        return saved, []

    def delete(self, profile_id: int, link_id: int) -> tuple[bool, list[LinkValidationError]]:
        """
        Delete a link. Remaining links keep their relative order.

        Returns:
            Tuple of (success, errors).
        """
        if not self._repo.delete(profile_id, link_id):
            return False, [_not_found(link_id)]

        logger.info("Deleted link %s from profile %s", link_id, profile_id)
        return True, []

    def reorder(
        self,
        profile_id: int,
        ordered_ids: list[int],
    ) -> tuple[list[Link] | None, list[LinkValidationError]]:
        """
        Give every link of the profile the position of its id in ordered_ids.

        The list must name each of the profile's links exactly once; anything
        else is rejected and no position changes.

        Returns:
            Tuple of (links in new order, errors). Links is None on rejection.
        """
        errors = validate_order(ordered_ids)
        if errors:
            return None, errors

        try:
            links = self._repo.reorder(profile_id, ordered_ids)
        except OrderMismatchError as e:
            logger.warning("Rejected reorder for profile %s: %s", profile_id, e)
            return None, [
                LinkValidationError(
                    code="reorder_ids_mismatch",
                    message="Ids must list every link of the profile exactly once",
                    field="ids",
                )
            ]

        logger.info("Reordered %d links for profile %s", len(links), profile_id)
        return links, []
