"""
Links component - Ordered link management for a profile page.

Shell Layer - turns inputs into service calls and results into outputs.
"""

from __future__ import annotations

from typing import Any

from ._impl import LinkService
from .models import (
    CreateLinkInput,
    DeleteLinkInput,
    GetLinkInput,
    LinkListOutput,
    LinkOperationOutput,
    LinkValidationError,
    ListLinksInput,
    ReorderLinksInput,
    UpdateLinkInput,
)

# --- Shell Layer Functions ---


def run_create(
    input_data: CreateLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Create a new link at the end of the profile's list."""
    link, errors = service.create(
        profile_id=input_data.profile_id,
        title=input_data.title,
        url=input_data.url,
        icon=input_data.icon,
        is_visible=input_data.is_visible,
    )

    return LinkOperationOutput(
        link=link,
        errors=tuple(errors),
        success=link is not None,
    )


def run_update(
    input_data: UpdateLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Update an existing link."""
    updates: dict[str, Any] = {}
    if input_data.title is not None:
        updates["title"] = input_data.title
    if input_data.url is not None:
        updates["url"] = input_data.url
    if input_data.icon is not None:
        updates["icon"] = input_data.icon
    if input_data.is_visible is not None:
        updates["is_visible"] = input_data.is_visible

    link, errors = service.update(input_data.profile_id, input_data.link_id, updates)

    return LinkOperationOutput(
        link=link,
        errors=tuple(errors),
        success=link is not None,
    )


def run_delete(
    input_data: DeleteLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Delete a link."""
    success, errors = service.delete(input_data.profile_id, input_data.link_id)

    return LinkOperationOutput(
        link=None,
        errors=tuple(errors),
        success=success,
    )


def run_get(
    input_data: GetLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Get a link by ID."""
    link = service.get_by_id(input_data.profile_id, input_data.link_id)

    if link is None:
        return LinkOperationOutput(
            link=None,
            errors=(
                LinkValidationError(
                    code="link_not_found",
                    message=f"Link with ID {input_data.link_id} not found",
                ),
            ),
            success=False,
        )

    return LinkOperationOutput(
        link=link,
        errors=(),
        success=True,
    )


def run_list(input_data: ListLinksInput, service: LinkService) -> LinkListOutput:
    """List a profile's links in position order."""
    if input_data.visible_only:
        links = service.get_visible(input_data.profile_id)
    else:
        links = service.get_all(input_data.profile_id)
    return LinkListOutput(
        links=tuple(links),
        total=len(links),
    )


def run_reorder(input_data: ReorderLinksInput, service: LinkService) -> LinkListOutput:
    """Apply a full new ordering of the profile's links."""
    links, errors = service.reorder(input_data.profile_id, list(input_data.ordered_ids))

    if links is None:
        return LinkListOutput(links=(), total=0, errors=tuple(errors), success=False)

    return LinkListOutput(
        links=tuple(links),
        total=len(links),
    )
