from pydantic import BaseModel, Field, model_validator


class RangeRule(BaseModel):
    min: int
    max: int

    @model_validator(mode="after")
    def _check_bounds(self) -> "RangeRule":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self

class RegexRule(RangeRule):
    pattern: str

class LinkRules(BaseModel):
    title: RangeRule = Field(default_factory=lambda: RangeRule(min=1, max=200))
    url_max_length: int = 2048
    allowed_link_protocols: list[str] = Field(default_factory=lambda: ["http", "https"])
    max_links_per_profile: int = 100
    icon_max_length: int = 64

class ProfileRules(BaseModel):
    username: RegexRule = Field(
        default_factory=lambda: RegexRule(min=1, max=30, pattern=r"^[A-Za-z0-9_.-]+$")
    )
    display_name_max: int = 100
    bio_max: int = 500
    theme_values: list[str] = Field(default_factory=lambda: ["default", "dark", "custom"])

class AuthRules(BaseModel):
    password_min_length: int = 8
    session_ttl_minutes: int = 60 * 24

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    apply_migrations_on_startup: bool = True

class Rules(BaseModel):
    rules_version: str
    links: LinkRules = Field(default_factory=LinkRules)
    profiles: ProfileRules = Field(default_factory=ProfileRules)
    auth: AuthRules = Field(default_factory=AuthRules)
    ops: OpsRules = Field(default_factory=OpsRules)
