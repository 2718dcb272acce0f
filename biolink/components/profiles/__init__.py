"""
Profiles component - One public profile page per user.
"""

from ._impl import ProfileService, validate_profile_data
from .component import run_create, run_update
from .models import (
    UPDATABLE_FIELDS,
    CreateProfileInput,
    ProfileOperationOutput,
    ProfileValidationError,
    UpdateProfileInput,
)
from .ports import ProfileRepoPort

__all__ = [
    "run_create",
    "run_update",
    "CreateProfileInput",
    "UpdateProfileInput",
    "ProfileOperationOutput",
    "ProfileValidationError",
    "ProfileRepoPort",
    "ProfileService",
    "validate_profile_data",
    "UPDATABLE_FIELDS",
]
