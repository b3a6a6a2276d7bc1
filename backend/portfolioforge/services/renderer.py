"""
Portfolio Renderer - stored PortfolioRecord to a self-contained HTML page.
"""
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..schemas.portfolio import PortfolioRecord

SHARE_IMAGE_PLACEHOLDER = "https://via.placeholder.com/1200x627/4F46E5/FFFFFF?text={text}"

_SAFE_URL_PREFIXES = ("http://", "https://", "mailto:", "data:image/")


def safe_url(value) -> str:
    """Only let known-safe schemes into href/src attributes."""
    if not value:
        return "#"
    value = str(value).strip()
    if value.lower().startswith(_SAFE_URL_PREFIXES):
        return value
    return "#"


def share_image_placeholder(name=None) -> str:
    return SHARE_IMAGE_PLACEHOLDER.format(text=quote(name or "Portfolio"))


# Jinja2 environment for template rendering; every {{ }} is HTML-escaped
template_dir = Path(__file__).parent.parent / "templates"
jinja_env = Environment(
    loader=FileSystemLoader(str(template_dir)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
jinja_env.filters["safe_url"] = safe_url


def render_portfolio(record: PortfolioRecord, page_url: str, image_url: str) -> str:
    """
    Render the public portfolio page.

    Args:
        record: Stored portfolio
        page_url: Absolute share URL (Open Graph url + footer)
        image_url: Absolute image URL for social previews

    Returns:
        Complete HTML document
    """
    template = jinja_env.get_template("portfolio.html")
    return template.render(
        profile=record.profile,
        info=record.profile.personal_info,
        theme=record.theme,
        picture_url=record.profile_picture_url or "https://via.placeholder.com/150",
        page_url=page_url,
        image_url=image_url,
    )


def render_error_page(title: str, message: str) -> str:
    template = jinja_env.get_template("error.html")
    return template.render(title=title, message=message)
