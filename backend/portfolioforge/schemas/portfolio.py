"""
Portfolio schemas - extracted profile, theme and stored record.

Attributes are snake_case; the JSON wire format (and the model prompt) uses
the camelCase aliases.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, field_validator


DEFAULT_PROFESSION = "Default"
PROFESSIONS = ("Software Developer", "Graphic Designer", "Data Scientist")

# Inline pictures are served back from our own origin, so only raster formats
RASTER_IMAGE_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")


def _none_to_list(value):
    return [] if value is None else value


def is_allowed_picture_url(value: str) -> bool:
    """http(s) links or base64 data URLs of a raster image type."""
    lowered = value.strip().lower()
    if lowered.startswith(("http://", "https://")):
        return True
    return any(lowered.startswith(f"data:{mime};base64,") for mime in RASTER_IMAGE_TYPES)


def _check_picture_url(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not is_allowed_picture_url(value):
        raise ValueError("profilePictureUrl must be an http(s) URL or a PNG, JPEG, GIF or WebP data URL")
    return value.strip()


# ============================================================================
# Profile Schemas
# ============================================================================

class PersonalInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None


class ExperienceEntry(BaseModel):
    company: Optional[str] = None
    role: Optional[str] = None
    dates: Optional[str] = None
    description: List[str] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def split_description(cls, value):
        """Accept a single block of text as newline separated bullets."""
        if value is None:
            return []
        if isinstance(value, str):
            lines = (line.strip().lstrip("-•*").strip() for line in value.splitlines())
            return [line for line in lines if line]
        return value


class ProjectEntry(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None


class EducationEntry(BaseModel):
    institution: Optional[str] = None
    degree: Optional[str] = None
    dates: Optional[str] = None


class PortfolioProfile(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo, alias="personalInfo")
    summary: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    projects: List[ProjectEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    profession: str = DEFAULT_PROFESSION

    class Config:
        populate_by_name = True

    @field_validator("personal_info", mode="before")
    @classmethod
    def default_personal_info(cls, value):
        return {} if value is None else value

    @field_validator("experience", "projects", "education", mode="before")
    @classmethod
    def default_lists(cls, value):
        return _none_to_list(value)

    @field_validator("skills", mode="before")
    @classmethod
    def dedupe_skills(cls, value):
        """Skills are a set; drop repeats that differ only by case or spacing."""
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        seen = set()
        skills = []
        for skill in value:
            if not isinstance(skill, str):
                continue
            skill = skill.strip()
            key = skill.lower()
            if skill and key not in seen:
                seen.add(key)
                skills.append(skill)
        return skills

    @field_validator("profession", mode="before")
    @classmethod
    def known_profession(cls, value):
        if isinstance(value, str) and value.strip() in PROFESSIONS:
            return value.strip()
        return DEFAULT_PROFESSION

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Theme(BaseModel):
    """Immutable bundle of styling tokens (Tailwind classes)."""
    name: str
    background: str
    primary_color: str = Field(alias="primaryColor")
    secondary_color: str = Field(alias="secondaryColor")
    card: str
    font: str
    button_style: str = Field(alias="buttonStyle")

    class Config:
        frozen = True
        populate_by_name = True

    @property
    def border_color(self) -> str:
        return self.secondary_color.replace("text-", "border-")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class PortfolioRecord(BaseModel):
    share_id: str
    profile: PortfolioProfile
    theme: Theme
    profile_picture_url: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None


# ============================================================================
# Request / Response Schemas
# ============================================================================

class GeneratePortfolioRequest(BaseModel):
    resume_text: Optional[str] = Field(default=None, alias="resumeText")
    manual_data: Optional[PortfolioProfile] = Field(default=None, alias="manualData")
    profile_picture_url: Optional[str] = Field(default=None, alias="profilePictureUrl")

    class Config:
        populate_by_name = True

    @field_validator("profile_picture_url", mode="before")
    @classmethod
    def check_picture_url(cls, value):
        return _check_picture_url(value)


class UpdatePortfolioRequest(BaseModel):
    portfolio_data: PortfolioProfile = Field(alias="portfolioData")
    # Either a theme name or a full theme object as returned by generate
    theme: Optional[Union[str, Dict[str, Any]]] = None
    profile_picture_url: Optional[str] = Field(default=None, alias="profilePictureUrl")

    class Config:
        populate_by_name = True

    @field_validator("profile_picture_url", mode="before")
    @classmethod
    def check_picture_url(cls, value):
        return _check_picture_url(value)

    @property
    def theme_name(self) -> Optional[str]:
        if isinstance(self.theme, dict):
            return self.theme.get("name")
        return self.theme


class GeneratePortfolioResponse(BaseModel):
    portfolio_id: str = Field(alias="portfolioId")
    portfolio_data: Dict[str, Any] = Field(alias="portfolioData")
    theme: Dict[str, Any]
    profile_picture_url: Optional[str] = Field(default=None, alias="profilePictureUrl")
    share_url: str = Field(alias="shareUrl")

    class Config:
        populate_by_name = True
