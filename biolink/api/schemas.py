"""Request/response models. The wire format uses camelCase field names."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from biolink.domain.entities import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BUTTON_COLOR,
    DEFAULT_BUTTON_TEXT_COLOR,
    DEFAULT_FONT,
    DEFAULT_TEXT_COLOR,
    DEFAULT_THEME,
    Link,
    Profile,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    message: str
    field: str | None = None
    code: str | None = None


# --- Links ---


class LinkCreateRequest(CamelModel):
    title: str
    url: str
    icon: str | None = None
    is_visible: bool = True


class LinkUpdateRequest(CamelModel):
    # order and profileId are not accepted here; unknown keys are ignored
    title: str | None = None
    url: str | None = None
    icon: str | None = None
    is_visible: bool | None = None


class ReorderLinksRequest(CamelModel):
    ids: list[int]


class LinkResponse(CamelModel):
    id: int
    profile_id: int
    title: str
    url: str
    icon: str | None
    order: int
    is_visible: bool

    @classmethod
    def from_entity(cls, link: Link) -> "LinkResponse":
        assert link.id is not None
        return cls(
            id=link.id,
            profile_id=link.profile_id,
            title=link.title,
            url=link.url,
            icon=link.icon,
            order=link.position,
            is_visible=link.is_visible,
        )


# --- Profiles ---


class ProfileCreateRequest(CamelModel):
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    show_username: bool = True
    bio: str | None = None
    theme: str = DEFAULT_THEME
    background_color: str | None = DEFAULT_BACKGROUND_COLOR
    text_color: str | None = DEFAULT_TEXT_COLOR
    button_color: str | None = DEFAULT_BUTTON_COLOR
    button_text_color: str | None = DEFAULT_BUTTON_TEXT_COLOR
    font: str | None = DEFAULT_FONT


class ProfileUpdateRequest(CamelModel):
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    show_username: bool | None = None
    bio: str | None = None
    theme: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    button_color: str | None = None
    button_text_color: str | None = None
    font: str | None = None


class ProfileResponse(CamelModel):
    id: int
    user_id: str
    username: str
    display_name: str | None
    avatar_url: str | None
    show_username: bool
    bio: str | None
    theme: str
    background_color: str | None
    text_color: str | None
    button_color: str | None
    button_text_color: str | None
    font: str | None

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        assert profile.id is not None
        data = profile.model_dump(exclude={"user_id"})
        return cls(user_id=str(profile.user_id), **data)


class PublicProfileResponse(CamelModel):
    profile: ProfileResponse
    links: list[LinkResponse]


# --- Auth ---


class RegisterRequest(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class UserResponse(BaseModel):
    id: str
    email: str
