"""
Portfolio Router - generation, update, public page and profile image
"""
import base64
import binascii
import json
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from ..config import Settings, get_settings
from ..dependencies import get_assembler, get_portfolio_store
from ..exceptions import InputError, NotFoundError, StorageError
from ..schemas.portfolio import (
    GeneratePortfolioRequest,
    GeneratePortfolioResponse,
    PortfolioProfile,
    PortfolioRecord,
    RASTER_IMAGE_TYPES,
    UpdatePortfolioRequest,
)
from ..services.assembler import PortfolioAssembler, ProfilePhoto
from ..services.pdf_text import resume_file_to_text
from ..services.renderer import render_error_page, render_portfolio, share_image_placeholder
from ..services.storage import PortfolioStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Portfolio"])

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
DATA_URL_PATTERN = re.compile(
    r"^data:(" + "|".join(re.escape(mime) for mime in RASTER_IMAGE_TYPES) + r");base64,(.+)$",
    re.DOTALL | re.IGNORECASE,
)

SHARE_HEADERS = {
    "Cache-Control": "public, max-age=3600",  # Cache for 1 hour
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


# ============================================================================
# Helper Functions
# ============================================================================

def public_base_url(request: Request, settings: Settings) -> str:
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    return str(request.base_url).rstrip("/")


def share_url(request: Request, settings: Settings, share_id: str) -> str:
    return f"{public_base_url(request, settings)}/portfolio/{share_id}"


def share_image_url(request: Request, settings: Settings, record: PortfolioRecord) -> str:
    """Absolute image URL for social previews; data URLs go through the image endpoint."""
    picture = record.profile_picture_url
    if picture and picture.startswith("data:"):
        return f"{public_base_url(request, settings)}/api/portfolio-image/{record.share_id}"
    if picture and picture.startswith(("http://", "https://")):
        return picture
    return share_image_placeholder(record.profile.personal_info.name)


async def read_upload(upload: UploadFile, settings: Settings, label: str) -> bytes:
    content = await upload.read()
    if len(content) > settings.max_upload_bytes:
        raise InputError(f"{label} must be less than {settings.max_upload_mb}MB")
    return content


async def read_photo(upload, settings: Settings) -> Optional[ProfilePhoto]:
    if not isinstance(upload, UploadFile) or not upload.filename:
        return None
    content_type = (upload.content_type or "").lower()
    if content_type not in RASTER_IMAGE_TYPES:
        raise InputError("Profile photo must be a PNG, JPEG, GIF or WebP image.")
    content = await read_upload(upload, settings, "Photo")
    if not content:
        return None
    return ProfilePhoto(content=content, content_type=content_type)


def parse_manual_data(raw) -> PortfolioProfile:
    try:
        if isinstance(raw, str):
            raw = json.loads(raw)
        return PortfolioProfile.model_validate(raw)
    except (json.JSONDecodeError, ValidationError) as e:
        raise InputError(f"Invalid manual portfolio data: {e}", "Invalid portfolio data.") from e


def generate_response(request: Request, settings: Settings, record: PortfolioRecord) -> dict:
    return GeneratePortfolioResponse(
        portfolio_id=record.share_id,
        portfolio_data=record.profile.to_wire(),
        theme=record.theme.to_wire(),
        profile_picture_url=record.profile_picture_url,
        share_url=share_url(request, settings, record.share_id),
    ).model_dump(by_alias=True)


def error_page(status_code: int, title: str, message: str) -> HTMLResponse:
    return HTMLResponse(render_error_page(title, message), status_code=status_code)


# ============================================================================
# API Endpoints
# ============================================================================

@router.post("/api/generate-portfolio")
async def generate_portfolio(
    request: Request,
    assembler: PortfolioAssembler = Depends(get_assembler),
    settings: Settings = Depends(get_settings),
):
    """
    Generate and store a portfolio.

    multipart/form-data (or urlencoded, manual data only): "resume" file
    (PDF or .txt) or "manualData" JSON string, optional PNG/JPEG/GIF/WebP
    "photo".
    application/json: {"resumeText": ...} or {"manualData": {...}}, optional
    "profilePictureUrl".
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        photo = await read_photo(form.get("photo"), settings)
        resume = form.get("resume")
        manual = form.get("manualData") or form.get("portfolioData")

        if isinstance(resume, UploadFile):
            content = await read_upload(resume, settings, "Resume file")
            resume_text = resume_file_to_text(content, resume.filename, resume.content_type)
            record = await assembler.create_from_resume(resume_text, photo=photo)
        elif manual:
            record = await assembler.create_from_manual(parse_manual_data(manual), photo=photo)
        else:
            raise InputError("Resume file (PDF) is required.")
        return generate_response(request, settings, record)

    try:
        body = await request.json()
        payload = GeneratePortfolioRequest.model_validate(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raise InputError(f"Malformed request body: {e}", "Malformed request body.") from e

    if payload.resume_text is not None:
        record = await assembler.create_from_resume(
            payload.resume_text, picture_url=payload.profile_picture_url
        )
    elif payload.manual_data is not None:
        record = await assembler.create_from_manual(
            payload.manual_data, picture_url=payload.profile_picture_url
        )
    else:
        raise InputError("Either resumeText or manualData is required.")
    return generate_response(request, settings, record)


@router.post("/api/update-portfolio/{share_id}")
async def update_portfolio(
    share_id: str,
    payload: UpdatePortfolioRequest,
    assembler: PortfolioAssembler = Depends(get_assembler),
):
    if not UUID_PATTERN.match(share_id):
        raise NotFoundError(f"Malformed portfolio id: {share_id}")
    record = await assembler.update(
        share_id,
        payload.portfolio_data,
        theme_name=payload.theme_name,
        picture_url=payload.profile_picture_url,
    )
    return {"success": True, "portfolioId": record.share_id}


@router.get("/api/portfolio-image/{share_id}")
async def portfolio_image(
    share_id: str,
    store: PortfolioStore = Depends(get_portfolio_store),
):
    """Serve an inline (data URL) profile picture as real image bytes."""
    record = await store.get(share_id) if UUID_PATTERN.match(share_id) else None
    if record is None:
        return Response("Portfolio not found", status_code=404, media_type="text/plain")

    picture = record.profile_picture_url or ""
    match = DATA_URL_PATTERN.match(picture)
    if match:
        try:
            image_bytes = base64.b64decode(match.group(2), validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Stored picture for {share_id} is not valid base64: {e}")
        else:
            return Response(
                content=image_bytes,
                media_type=match.group(1).lower(),
                headers={"X-Content-Type-Options": "nosniff"},
            )

    if picture.startswith(("http://", "https://")):
        return RedirectResponse(url=picture, status_code=302)
    return RedirectResponse(url=share_image_placeholder(), status_code=302)


# ============================================================================
# Public Page
# ============================================================================

@router.get("/portfolio/{share_id}", response_class=HTMLResponse)
@router.get("/shared/{share_id}", response_class=HTMLResponse)
async def view_portfolio(
    share_id: str,
    request: Request,
    store: PortfolioStore = Depends(get_portfolio_store),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"Request received for portfolio ID: {share_id}")

    if not UUID_PATTERN.match(share_id):
        logger.info(f"Invalid portfolio ID format: {share_id}")
        return error_page(
            400,
            "Invalid Portfolio ID",
            "The portfolio ID you provided is not valid. Please check the URL and try again.",
        )

    try:
        record = await store.get(share_id)
    except StorageError as e:
        logger.error(f"Error loading portfolio {share_id}: {e.detail}")
        return error_page(
            500,
            "Server Error",
            "We encountered an error while loading this portfolio. Please try again later.",
        )

    if record is None:
        logger.info(f"Portfolio not found for ID: {share_id}")
        return error_page(
            404,
            "Portfolio Not Found",
            "The portfolio you're looking for doesn't exist or may have been deleted.",
        )

    try:
        html = render_portfolio(
            record,
            page_url=share_url(request, settings, share_id),
            image_url=share_image_url(request, settings, record),
        )
    except Exception:
        logger.exception(f"Error serving portfolio {share_id}")
        return error_page(
            500,
            "Server Error",
            "We encountered an error while loading this portfolio. Please try again later.",
        )

    return HTMLResponse(html, headers=SHARE_HEADERS)
