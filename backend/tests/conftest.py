"""
Shared fixtures: a scripted text generator standing in for Gemini and an
in-memory store wired into the FastAPI app.
"""
import json
import os

# Keep tests independent of any local .env / shell configuration
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["PUBLIC_BASE_URL"] = "https://portfolios.example.com"
os.environ["PORT"] = "3000"

import pytest
from fastapi.testclient import TestClient

from portfolioforge.dependencies import get_portfolio_store, get_text_generator
from portfolioforge.main import app
from portfolioforge.schemas.portfolio import PortfolioProfile
from portfolioforge.services.assembler import PortfolioAssembler
from portfolioforge.services.profession_classifier import ProfessionClassifier
from portfolioforge.services.resume_extractor import ResumeExtractor
from portfolioforge.services.storage import InMemoryPortfolioStore


class FakeGenerator:
    """Returns canned replies in order and records every prompt."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("Unexpected model call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


SAMPLE_EXTRACTION = {
    "personalInfo": {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0000",
        "website": "https://ada.dev",
        "linkedin": "https://www.linkedin.com/in/adalovelace",
        "github": "adal",
    },
    "summary": "Backend engineer building data pipelines.",
    "skills": ["Python", "FastAPI", "python", "PostgreSQL"],
    "experience": [
        {
            "company": "Analytical Engines Ltd",
            "role": "Senior Engineer",
            "dates": "2019 - Present",
            "description": ["Built the scheduler", "Led the API team"],
        }
    ],
    "projects": [
        {"title": "Note G", "description": "First published algorithm", "link": "https://example.com/note-g"}
    ],
    "education": [
        {"institution": "University of London", "degree": "BSc Mathematics", "dates": "1835 - 1838"}
    ],
}


@pytest.fixture
def extraction_reply():
    return "```json\n" + json.dumps(SAMPLE_EXTRACTION) + "\n```"


@pytest.fixture
def manual_profile():
    return PortfolioProfile.model_validate({
        "personalInfo": {"name": "Grace Hopper", "linkedin": "ghopper", "github": "https://github.com/grace"},
        "summary": "Compiler pioneer.",
        "skills": ["COBOL"],
    })


@pytest.fixture
def store():
    return InMemoryPortfolioStore()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def make_assembler(store):
    def _make(generator):
        return PortfolioAssembler(
            store=store,
            extractor=ResumeExtractor(generator),
            classifier=ProfessionClassifier(generator),
        )
    return _make


@pytest.fixture
def client(store, generator):
    app.dependency_overrides[get_portfolio_store] = lambda: store
    app.dependency_overrides[get_text_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
