"""
Portfolio table - same row shape as the hosted Supabase "portfolios" table
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, JSON
from ..database import Base


class PortfolioRow(Base):
    __tablename__ = "portfolios"

    share_id = Column(String(36), primary_key=True, index=True)
    portfolio_data = Column(JSON, nullable=False)
    profile_picture_url = Column(Text, nullable=True)
    selected_theme = Column(String(100), nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)
