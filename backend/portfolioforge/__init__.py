"""PortfolioForge - resume to shareable portfolio generator."""

__version__ = "1.0.0"
