"""
Theme table - one visual style per profession category.
"""
from types import MappingProxyType
from typing import Optional

from ..schemas.portfolio import DEFAULT_PROFESSION, Theme


THEMES = MappingProxyType({
    "Software Developer": Theme(
        name="Developer Dark",
        background="bg-gray-900 text-white",
        primaryColor="bg-blue-500",
        secondaryColor="text-blue-400",
        card="bg-gray-800",
        font="font-mono",
        buttonStyle="bg-blue-600 hover:bg-blue-700",
    ),
    "Graphic Designer": Theme(
        name="Designer Light",
        background="bg-white text-gray-800",
        primaryColor="bg-pink-500",
        secondaryColor="text-pink-500",
        card="bg-gray-50",
        font="font-sans",
        buttonStyle="bg-pink-600 hover:bg-pink-700",
    ),
    "Data Scientist": Theme(
        name="Data Green",
        background="bg-gray-800 text-gray-100",
        primaryColor="bg-green-500",
        secondaryColor="text-green-400",
        card="bg-gray-700",
        font="font-sans",
        buttonStyle="bg-green-600 hover:bg-green-700",
    ),
    DEFAULT_PROFESSION: Theme(
        name="Professional Blue",
        background="bg-gray-100 text-gray-900",
        primaryColor="bg-indigo-600",
        secondaryColor="text-indigo-500",
        card="bg-white",
        font="font-sans",
        buttonStyle="bg-indigo-600 hover:bg-indigo-700",
    ),
})

_THEMES_BY_NAME = {theme.name: theme for theme in THEMES.values()}


def resolve_profession(label: Optional[str]) -> str:
    """Return the label if it is a known category, otherwise "Default"."""
    if label and label in THEMES:
        return label
    return DEFAULT_PROFESSION


def get_theme(profession: Optional[str]) -> Theme:
    return THEMES[resolve_profession(profession)]


def get_theme_by_name(name: Optional[str]) -> Optional[Theme]:
    """Look up a theme by its display name ("Developer Dark", ...)."""
    if not name:
        return None
    return _THEMES_BY_NAME.get(name)
