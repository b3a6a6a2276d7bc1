"""
Profession Classifier - picks a profession category (and so a theme) for a profile.
"""
import logging
from typing import Tuple

from ..schemas.portfolio import PortfolioProfile, Theme
from .resume_extractor import TextGenerator
from .themes import THEMES, resolve_profession

logger = logging.getLogger(__name__)

CLASSIFICATION_PROMPT = """
Based on the following professional summary and skills, classify the profession into one of these categories:
- Software Developer
- Graphic Designer
- Data Scientist
If the profession doesn't clearly fit, respond with "Default".
Respond with ONLY the category name.
"""


def describe_profile(profile: PortfolioProfile) -> str:
    return f"Summary: {profile.summary or ''}. Skills: {', '.join(profile.skills)}."


def clean_label(response_text: str) -> str:
    label = (response_text or "").strip()
    return label.strip("\"'` ").rstrip(".").strip()


class ProfessionClassifier:
    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def classify(self, profile: PortfolioProfile) -> Tuple[str, Theme]:
        """
        Return (profession, theme). Never raises: any failure or unknown
        label falls back to the Default category.
        """
        try:
            response_text = await self.generator.generate(
                f"{CLASSIFICATION_PROMPT}\n\n{describe_profile(profile)}"
            )
        except Exception as e:
            logger.error(f"Error classifying profession, using Default: {e}")
            return resolve_profession(None), THEMES[resolve_profession(None)]

        label = clean_label(response_text)
        profession = resolve_profession(label)
        if profession != label:
            logger.info(f"Unrecognised profession label {label!r}, using {profession}")
        logger.info(f"AI classified profession as: {profession}")
        return profession, THEMES[profession]
