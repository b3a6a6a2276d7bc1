"""
Resume Extractor - turns raw resume text into a PortfolioProfile with Gemini.
"""
import json
import logging
import re
from typing import Any, Dict, List, Protocol

from pydantic import ValidationError

from ..exceptions import EmptyInputError, MalformedExtraction
from ..schemas.portfolio import PortfolioProfile
from .social_links import extract_username

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


# ============================================================================
# Resume Extraction Prompt
# ============================================================================

RESUME_EXTRACTION_PROMPT = """
You are an expert resume parser. Analyze the following resume text and extract the information into a structured JSON object.
The JSON object must have exactly these keys:
- "personalInfo": An object with "name", "email", "phone", "website", "linkedin", and "github".
  For "linkedin" and "github", extract ONLY the username (without the full URL).
  For example, if the resume has "https://linkedin.com/in/johndoe", extract "johndoe".
  If the resume only has the username (e.g., "johndoe"), use that as is.
- "summary": A string containing the professional summary or objective.
- "skills": An array of strings listing all technical and soft skills.
- "experience": An array of objects, where each object has "company", "role", "dates", and "description" (as an array of strings).
- "projects": An array of objects, where each object has "title", "description", and "link".
- "education": An array of objects, where each object has "institution", "degree", and "dates".

If a piece of information is not found, return null for its value.
Ensure the output is ONLY the raw JSON object, without any markdown formatting like ```json.
"""

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def build_extraction_prompt(resume_text: str) -> str:
    return f"{RESUME_EXTRACTION_PROMPT}\n\n--- RESUME TEXT ---\n\n{resume_text}"


def parse_model_json(response_text: str) -> Dict[str, Any]:
    """
    Parse the JSON object out of a model reply.

    Markdown fences are removed; if the reply does not start with "{" the span
    from the first "{" to the last "}" is used instead.
    """
    json_text = _FENCE_PATTERN.sub("", response_text or "").strip()

    if not json_text.startswith("{"):
        match = _OBJECT_PATTERN.search(json_text)
        if match:
            json_text = match.group(0)

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON from AI response: {e}")
        logger.debug(f"Raw response: {response_text[:500]}...")
        raise MalformedExtraction("AI model returned an invalid JSON format.") from e

    if not isinstance(parsed, dict):
        raise MalformedExtraction(f"AI model returned {type(parsed).__name__}, expected a JSON object.")
    return parsed


def _dicts(value) -> List[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _text(value):
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v is not None) or None
    value = str(value).strip()
    return value or None


def normalize_extraction_output(data: dict) -> dict:
    """
    Coerce the model's JSON into the PortfolioProfile shape.

    Nulls become empty values, stray non-object entries are dropped and
    linkedin/github are reduced to bare usernames.
    """
    pi = data.get("personalInfo") or data.get("personal_info") or {}
    if not isinstance(pi, dict):
        pi = {}

    personal_info = {
        key: _text(pi.get(key))
        for key in ("name", "email", "phone", "website", "linkedin", "github")
    }
    personal_info["linkedin"] = extract_username("linkedin", personal_info["linkedin"])
    personal_info["github"] = extract_username("github", personal_info["github"])

    skills = data.get("skills")
    if isinstance(skills, str):
        skills = skills.split(",")
    elif not isinstance(skills, list):
        skills = []
    skills = [s for s in (_text(skill) for skill in skills if not isinstance(skill, dict)) if s]

    experience = []
    for exp in _dicts(data.get("experience")):
        description = exp.get("description")
        if isinstance(description, list):
            description = [d for d in (_text(item) for item in description) if d]
        experience.append({
            "company": _text(exp.get("company")),
            "role": _text(exp.get("role") or exp.get("title")),
            "dates": _text(exp.get("dates")),
            "description": description,
        })

    projects = [
        {
            "title": _text(proj.get("title") or proj.get("name")),
            "description": _text(proj.get("description")),
            "link": _text(proj.get("link") or proj.get("url")),
        }
        for proj in _dicts(data.get("projects"))
    ]

    education = [
        {
            "institution": _text(edu.get("institution") or edu.get("school")),
            "degree": _text(edu.get("degree")),
            "dates": _text(edu.get("dates")),
        }
        for edu in _dicts(data.get("education"))
    ]

    return {
        "personalInfo": personal_info,
        "summary": _text(data.get("summary")),
        "skills": skills,
        "experience": experience,
        "projects": projects,
        "education": education,
    }


class ResumeExtractor:
    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def extract(self, resume_text: str) -> PortfolioProfile:
        """
        Extract a PortfolioProfile from resume text with one model call.

        Raises:
            EmptyInputError: resume_text is blank
            ExternalServiceError: the model call failed
            MalformedExtraction: the reply could not be parsed
        """
        if not resume_text or not resume_text.strip():
            raise EmptyInputError()

        response_text = await self.generator.generate(build_extraction_prompt(resume_text))
        parsed_data = parse_model_json(response_text)

        try:
            return PortfolioProfile.model_validate(normalize_extraction_output(parsed_data))
        except ValidationError as e:
            logger.error(f"Extracted resume did not match the profile schema: {e}")
            raise MalformedExtraction("AI model returned an unexpected resume structure.") from e
