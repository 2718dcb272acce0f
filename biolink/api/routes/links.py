"""Routes for the caller's own links."""

from fastapi import APIRouter, Depends

from biolink.api.deps import get_current_profile, get_link_service
from biolink.api.errors import raise_for_errors
from biolink.api.schemas import (
    LinkCreateRequest,
    LinkResponse,
    LinkUpdateRequest,
    ReorderLinksRequest,
)
from biolink.components.links import (
    CreateLinkInput,
    DeleteLinkInput,
    LinkService,
    ListLinksInput,
    ReorderLinksInput,
    UpdateLinkInput,
    run_create,
    run_delete,
    run_list,
    run_reorder,
    run_update,
)
from biolink.domain.entities import Profile

router = APIRouter()


@router.get("/links", response_model=list[LinkResponse])
def list_links(
    profile: Profile = Depends(get_current_profile),
    service: LinkService = Depends(get_link_service),
) -> list[LinkResponse]:
    """List the caller's links, including hidden ones, in display order."""
    assert profile.id is not None
    result = run_list(ListLinksInput(profile_id=profile.id), service)
    return [LinkResponse.from_entity(link) for link in result.links]


@router.post("/links", response_model=LinkResponse, status_code=201)
def create_link(
    data: LinkCreateRequest,
    profile: Profile = Depends(get_current_profile),
    service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    """Append a link to the end of the caller's list."""
    assert profile.id is not None
    input_data = CreateLinkInput(
        profile_id=profile.id,
        title=data.title,
        url=data.url,
        icon=data.icon,
        is_visible=data.is_visible,
    )

    result = run_create(input_data, service)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.link is not None
    return LinkResponse.from_entity(result.link)


@router.post("/links/reorder", response_model=list[LinkResponse])
def reorder_links(
    data: ReorderLinksRequest,
    profile: Profile = Depends(get_current_profile),
    service: LinkService = Depends(get_link_service),
) -> list[LinkResponse]:
    """Replace the order of all the caller's links."""
    assert profile.id is not None
    result = run_reorder(
        ReorderLinksInput(profile_id=profile.id, ordered_ids=tuple(data.ids)), service
    )
    if not result.success:
        raise_for_errors(result.errors)

    return [LinkResponse.from_entity(link) for link in result.links]


@router.patch("/links/{link_id}", response_model=LinkResponse)
def update_link(
    link_id: int,
    data: LinkUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    service: LinkService = Depends(get_link_service),
) -> LinkResponse:
    """Update title, url, icon or visibility of one of the caller's links."""
    assert profile.id is not None
    icon = data.icon
    if icon is None and "icon" in data.model_fields_set:
        icon = ""  # explicit null clears the icon

    input_data = UpdateLinkInput(
        profile_id=profile.id,
        link_id=link_id,
        title=data.title,
        url=data.url,
        icon=icon,
        is_visible=data.is_visible,
    )

    result = run_update(input_data, service)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.link is not None
    return LinkResponse.from_entity(result.link)


@router.delete("/links/{link_id}", status_code=204)
def delete_link(
    link_id: int,
    profile: Profile = Depends(get_current_profile),
    service: LinkService = Depends(get_link_service),
) -> None:
    """Delete one of the caller's links."""
    assert profile.id is not None
    result = run_delete(DeleteLinkInput(profile_id=profile.id, link_id=link_id), service)
    if not result.success:
        raise_for_errors(result.errors)
