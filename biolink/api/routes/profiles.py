"""Routes for the caller's own profile."""

from fastapi import APIRouter, Depends

from biolink.api.deps import get_current_user, get_profile_service
from biolink.api.errors import raise_for_errors
from biolink.api.schemas import ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest
from biolink.components.profiles import (
    CreateProfileInput,
    ProfileService,
    UpdateProfileInput,
    run_create,
    run_update,
)
from biolink.domain.entities import User

router = APIRouter()


@router.get("/profiles/me", response_model=ProfileResponse | None)
def get_my_profile(
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse | None:
    """The caller's profile, or null if not created yet."""
    profile = service.get_by_user(current_user.id)
    return ProfileResponse.from_entity(profile) if profile else None


@router.post("/profiles", response_model=ProfileResponse, status_code=201)
def create_profile(
    data: ProfileCreateRequest,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Create the caller's profile; the username must be unused."""
    input_data = CreateProfileInput(user_id=current_user.id, **data.model_dump())

    result = run_create(input_data, service)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.profile is not None
    return ProfileResponse.from_entity(result.profile)


@router.patch("/profiles/me", response_model=ProfileResponse)
def update_my_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Apply the fields present in the body to the caller's profile."""
    changes = data.model_dump(exclude_unset=True)
    result = run_update(UpdateProfileInput(user_id=current_user.id, changes=changes), service)
    if not result.success:
        raise_for_errors(result.errors)

    assert result.profile is not None
    return ProfileResponse.from_entity(result.profile)
