from .portfolio import router as portfolio_router
from .system import router as system_router

__all__ = ["portfolio_router", "system_router"]
