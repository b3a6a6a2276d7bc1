from .themes import THEMES, get_theme, get_theme_by_name, resolve_profession
from .social_links import normalize_profile_url, extract_username
from .resume_extractor import ResumeExtractor, parse_model_json, normalize_extraction_output
from .profession_classifier import ProfessionClassifier
from .storage import (
    PortfolioStore,
    InMemoryPortfolioStore,
    SqlPortfolioStore,
    SupabasePortfolioStore,
)
from .assembler import PortfolioAssembler, ProfilePhoto
from .renderer import render_portfolio, render_error_page

__all__ = [
    # Themes
    "THEMES",
    "get_theme",
    "get_theme_by_name",
    "resolve_profession",
    # Social links
    "normalize_profile_url",
    "extract_username",
    # Extraction / classification
    "ResumeExtractor",
    "parse_model_json",
    "normalize_extraction_output",
    "ProfessionClassifier",
    # Storage
    "PortfolioStore",
    "InMemoryPortfolioStore",
    "SqlPortfolioStore",
    "SupabasePortfolioStore",
    # Assembly / rendering
    "PortfolioAssembler",
    "ProfilePhoto",
    "render_portfolio",
    "render_error_page",
]
