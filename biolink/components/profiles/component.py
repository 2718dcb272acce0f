"""
Profiles component - Public profile management.

Shell Layer - wraps service results in output models.
"""

from __future__ import annotations

from dataclasses import asdict

from ._impl import ProfileService
from .models import CreateProfileInput, ProfileOperationOutput, UpdateProfileInput


def run_create(input_data: CreateProfileInput, service: ProfileService) -> ProfileOperationOutput:
    """Create the caller's profile."""
    fields = asdict(input_data)
    user_id = fields.pop("user_id")
    profile, errors = service.create(user_id, fields)
    return ProfileOperationOutput(
        profile=profile,
        errors=tuple(errors),
        success=profile is not None,
    )


def run_update(input_data: UpdateProfileInput, service: ProfileService) -> ProfileOperationOutput:
    """Apply a partial update to the caller's profile."""
    profile, errors = service.update(input_data.user_id, dict(input_data.changes))
    return ProfileOperationOutput(
        profile=profile,
        errors=tuple(errors),
        success=profile is not None,
    )
