from .portfolio import PortfolioRow

__all__ = ["PortfolioRow"]
