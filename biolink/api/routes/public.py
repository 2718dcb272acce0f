"""Unauthenticated public page data."""

from fastapi import APIRouter, Depends, HTTPException

from biolink.api.deps import get_link_service, get_profile_service
from biolink.api.schemas import LinkResponse, ProfileResponse, PublicProfileResponse
from biolink.components.links import LinkService, ListLinksInput, run_list
from biolink.components.profiles import ProfileService

router = APIRouter()


@router.get("/profiles/{username}", response_model=PublicProfileResponse)
def get_public_profile(
    username: str,
    profiles: ProfileService = Depends(get_profile_service),
    links: LinkService = Depends(get_link_service),
) -> PublicProfileResponse:
    """A profile and its visible links, in display order."""
    profile = profiles.get_by_username(username)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    assert profile.id is not None
    result = run_list(ListLinksInput(profile_id=profile.id, visible_only=True), links)
    return PublicProfileResponse(
        profile=ProfileResponse.from_entity(profile),
        links=[LinkResponse.from_entity(link) for link in result.links],
    )
