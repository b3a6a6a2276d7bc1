"""
FastAPI dependency providers - one store and one generator per process.
"""
from functools import lru_cache

from fastapi import Depends

from .config import get_settings
from .services.assembler import PortfolioAssembler
from .services.gemini import GeminiTextGenerator
from .services.profession_classifier import ProfessionClassifier
from .services.resume_extractor import ResumeExtractor, TextGenerator
from .services.storage import (
    InMemoryPortfolioStore,
    PortfolioStore,
    SqlPortfolioStore,
    SupabasePortfolioStore,
)

STORAGE_BACKENDS = ("memory", "database", "supabase")


@lru_cache()
def get_portfolio_store() -> PortfolioStore:
    settings = get_settings()
    backend = settings.storage_backend.lower()

    if backend == "memory":
        return InMemoryPortfolioStore()
    if backend == "database":
        from .database import async_session_maker
        return SqlPortfolioStore(async_session_maker)
    if backend == "supabase":
        return SupabasePortfolioStore(
            settings.supabase_url,
            settings.supabase_anon_key,
            table=settings.supabase_table,
        )
    raise ValueError(f"Unknown storage_backend {settings.storage_backend!r}, expected one of {STORAGE_BACKENDS}")


@lru_cache()
def get_text_generator() -> TextGenerator:
    return GeminiTextGenerator(get_settings())


def get_assembler(
    store: PortfolioStore = Depends(get_portfolio_store),
    generator: TextGenerator = Depends(get_text_generator),
) -> PortfolioAssembler:
    return PortfolioAssembler(
        store=store,
        extractor=ResumeExtractor(generator),
        classifier=ProfessionClassifier(generator),
    )
