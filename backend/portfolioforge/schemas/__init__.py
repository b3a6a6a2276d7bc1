from .portfolio import (
    DEFAULT_PROFESSION,
    PROFESSIONS,
    RASTER_IMAGE_TYPES,
    PersonalInfo,
    ExperienceEntry,
    ProjectEntry,
    EducationEntry,
    PortfolioProfile,
    Theme,
    PortfolioRecord,
    GeneratePortfolioRequest,
    UpdatePortfolioRequest,
    GeneratePortfolioResponse,
)

__all__ = [
    "DEFAULT_PROFESSION", "PROFESSIONS", "RASTER_IMAGE_TYPES",
    "PersonalInfo", "ExperienceEntry", "ProjectEntry", "EducationEntry",
    "PortfolioProfile", "Theme", "PortfolioRecord",
    "GeneratePortfolioRequest", "UpdatePortfolioRequest", "GeneratePortfolioResponse",
]
