"""
Portfolio Assembler - resume text or manual data in, persisted PortfolioRecord out.
"""
import base64
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from ..exceptions import EmptyInputError, NotFoundError
from ..schemas.portfolio import DEFAULT_PROFESSION, PortfolioProfile, PortfolioRecord
from .profession_classifier import ProfessionClassifier
from .resume_extractor import ResumeExtractor
from .social_links import normalize_profile_url
from .storage import PortfolioStore
from .themes import THEMES, get_theme, get_theme_by_name

logger = logging.getLogger(__name__)

PLACEHOLDER_AVATAR_URL = "https://placehold.co/150x150/222/fff?text={initial}"


@dataclass
class ProfilePhoto:
    content: bytes
    content_type: str = "image/png"

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


def placeholder_avatar_url(name: Optional[str]) -> str:
    initial = name.strip()[0] if name and name.strip() else "P"
    return PLACEHOLDER_AVATAR_URL.format(initial=quote(initial))


def normalize_social_links(profile: PortfolioProfile) -> PortfolioProfile:
    """Return a copy with linkedin/github turned into full profile URLs."""
    info = profile.personal_info
    personal_info = info.model_copy(update={
        "linkedin": normalize_profile_url("linkedin", info.linkedin) or None,
        "github": normalize_profile_url("github", info.github) or None,
    })
    return profile.model_copy(update={"personal_info": personal_info})


class PortfolioAssembler:
    def __init__(
        self,
        store: PortfolioStore,
        extractor: ResumeExtractor,
        classifier: ProfessionClassifier,
    ):
        self.store = store
        self.extractor = extractor
        self.classifier = classifier

    def _picture_url(
        self,
        profile: PortfolioProfile,
        photo: Optional[ProfilePhoto],
        picture_url: Optional[str],
    ) -> str:
        if photo is not None and photo.content:
            return photo.to_data_url()
        if picture_url:
            return picture_url
        return placeholder_avatar_url(profile.personal_info.name)

    async def _persist(self, profile: PortfolioProfile, picture_url: str) -> PortfolioRecord:
        record = PortfolioRecord(
            share_id=str(uuid.uuid4()),
            profile=profile,
            theme=get_theme(profile.profession),
            profile_picture_url=picture_url,
        )
        await self.store.put(record)
        logger.info(f"Portfolio created with ID: {record.share_id} ({profile.profession})")
        return record

    async def create_from_resume(
        self,
        resume_text: str,
        photo: Optional[ProfilePhoto] = None,
        picture_url: Optional[str] = None,
    ) -> PortfolioRecord:
        """Extract, classify, normalize and store. Blank text fails before any model call."""
        if not resume_text or not resume_text.strip():
            raise EmptyInputError()

        profile = await self.extractor.extract(resume_text)
        profession, _ = await self.classifier.classify(profile)
        profile = normalize_social_links(profile.model_copy(update={"profession": profession}))

        return await self._persist(profile, self._picture_url(profile, photo, picture_url))

    async def create_from_manual(
        self,
        profile: PortfolioProfile,
        photo: Optional[ProfilePhoto] = None,
        picture_url: Optional[str] = None,
    ) -> PortfolioRecord:
        """Manual data skips the model entirely and always gets the Default theme."""
        profile = normalize_social_links(profile.model_copy(update={"profession": DEFAULT_PROFESSION}))
        return await self._persist(profile, self._picture_url(profile, photo, picture_url))

    async def get(self, share_id: str) -> PortfolioRecord:
        record = await self.store.get(share_id)
        if record is None:
            raise NotFoundError(f"Portfolio not found for ID: {share_id}")
        return record

    async def update(
        self,
        share_id: str,
        profile: PortfolioProfile,
        theme_name: Optional[str] = None,
        picture_url: Optional[str] = None,
    ) -> PortfolioRecord:
        existing = await self.get(share_id)

        # Keep the classified profession unless the caller names a known one
        profession = profile.profession
        if profession == DEFAULT_PROFESSION and "profession" not in profile.model_fields_set:
            profession = existing.profile.profession
        profile = normalize_social_links(profile.model_copy(update={"profession": profession}))

        theme = get_theme_by_name(theme_name) or THEMES[profile.profession]

        record = existing.model_copy(update={
            "profile": profile,
            "theme": theme,
            "profile_picture_url": picture_url or existing.profile_picture_url,
            "updated_at": datetime.now(timezone.utc),
        })
        if not await self.store.update(record):
            raise NotFoundError(f"Portfolio not found for ID: {share_id}")
        logger.info(f"Portfolio updated with ID: {share_id}")
        return record
