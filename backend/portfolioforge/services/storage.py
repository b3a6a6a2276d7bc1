"""
Portfolio stores - get/put/update of PortfolioRecords by share id.

Backends:
    InMemoryPortfolioStore  - per-process dict, lost on restart
    SqlPortfolioStore       - SQLAlchemy async table (SQLite / PostgreSQL)
    SupabasePortfolioStore  - hosted Supabase table through the PostgREST API
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..exceptions import LOAD_FAILED_MESSAGE, StorageError
from ..models.portfolio import PortfolioRow
from ..schemas.portfolio import PortfolioProfile, PortfolioRecord
from .themes import get_theme, get_theme_by_name

logger = logging.getLogger(__name__)


def record_to_row(record: PortfolioRecord) -> Dict[str, Any]:
    """Row shape shared by the SQL and Supabase tables."""
    return {
        "share_id": record.share_id,
        "portfolio_data": record.profile.to_wire(),
        "profile_picture_url": record.profile_picture_url,
        "selected_theme": record.theme.name,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


def record_from_row(row: Dict[str, Any]) -> PortfolioRecord:
    profile = PortfolioProfile.model_validate(row.get("portfolio_data") or {})

    selected_theme = row.get("selected_theme")
    if isinstance(selected_theme, dict):
        # Older rows stored the whole theme object
        selected_theme = selected_theme.get("name")
    theme = get_theme_by_name(selected_theme) or get_theme(profile.profession)

    record = {
        "share_id": str(row["share_id"]),
        "profile": profile,
        "theme": theme,
        "profile_picture_url": row.get("profile_picture_url"),
        "updated_at": row.get("updated_at"),
    }
    if row.get("created_at"):
        record["created_at"] = row["created_at"]
    return PortfolioRecord(**record)


class PortfolioStore(ABC):
    @abstractmethod
    async def get(self, share_id: str) -> Optional[PortfolioRecord]:
        ...

    @abstractmethod
    async def put(self, record: PortfolioRecord) -> None:
        ...

    @abstractmethod
    async def update(self, record: PortfolioRecord) -> bool:
        """Replace an existing record. Returns False if the id is unknown."""

    async def close(self) -> None:
        pass


class InMemoryPortfolioStore(PortfolioStore):
    def __init__(self):
        self._records: Dict[str, PortfolioRecord] = {}

    def __len__(self):
        return len(self._records)

    def ids(self):
        return list(self._records)

    async def get(self, share_id: str) -> Optional[PortfolioRecord]:
        return self._records.get(share_id)

    async def put(self, record: PortfolioRecord) -> None:
        self._records[record.share_id] = record

    async def update(self, record: PortfolioRecord) -> bool:
        if record.share_id not in self._records:
            return False
        self._records[record.share_id] = record
        return True


class SqlPortfolioStore(PortfolioStore):
    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker

    async def get(self, share_id: str) -> Optional[PortfolioRecord]:
        try:
            async with self.session_maker() as session:
                row = await session.get(PortfolioRow, share_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load portfolio {share_id}: {e}")
            raise StorageError(f"Database read failed: {e}", LOAD_FAILED_MESSAGE) from e
        if row is None:
            return None
        return record_from_row({
            "share_id": row.share_id,
            "portfolio_data": row.portfolio_data,
            "profile_picture_url": row.profile_picture_url,
            "selected_theme": row.selected_theme,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        })

    async def put(self, record: PortfolioRecord) -> None:
        try:
            async with self.session_maker() as session:
                session.add(PortfolioRow(**record_to_row(record)))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save portfolio {record.share_id}: {e}")
            raise StorageError(f"Database insert failed: {e}") from e

    async def update(self, record: PortfolioRecord) -> bool:
        try:
            async with self.session_maker() as session:
                row = await session.get(PortfolioRow, record.share_id)
                if row is None:
                    return False
                await self._apply(session, row, record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update portfolio {record.share_id}: {e}")
            raise StorageError(f"Database update failed: {e}") from e
        return True

    @staticmethod
    async def _apply(session: AsyncSession, row: PortfolioRow, record: PortfolioRecord):
        values = record_to_row(record)
        row.portfolio_data = values["portfolio_data"]
        row.profile_picture_url = values["profile_picture_url"]
        row.selected_theme = values["selected_theme"]
        row.updated_at = values["updated_at"]
        await session.commit()


class SupabasePortfolioStore(PortfolioStore):
    """
    Portfolios table in Supabase, accessed over the PostgREST API.

    Expected columns: share_id (uuid), portfolio_data (jsonb),
    profile_picture_url (text), selected_theme (text), created_at, updated_at.
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        table: str = "portfolios",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not supabase_url or not supabase_key:
            raise StorageError("Supabase configuration missing")
        self.table = table
        self.client = httpx.AsyncClient(
            base_url=f"{supabase_url.rstrip('/')}/rest/v1",
            headers={
                "Authorization": f"Bearer {supabase_key}",
                "apikey": supabase_key,
                "Content-Type": "application/json",
            },
            timeout=30.0,
            transport=transport,
        )

    @staticmethod
    def _serialize(record: PortfolioRecord) -> Dict[str, Any]:
        row = record_to_row(record)
        for key in ("created_at", "updated_at"):
            if row[key] is not None:
                row[key] = row[key].isoformat()
        return row

    async def _request(
        self, method: str, public_message: Optional[str] = None, **kwargs
    ) -> httpx.Response:
        try:
            response = await self.client.request(method, f"/{self.table}", **kwargs)
        except httpx.TimeoutException as e:
            raise StorageError("Supabase request timed out", public_message) from e
        except httpx.HTTPError as e:
            raise StorageError(f"Supabase request failed: {e}", public_message) from e

        if response.status_code not in (200, 201, 204):
            error_detail = response.text[:500] if response.text else "Unknown error"
            logger.error(f"Supabase error ({response.status_code}): {error_detail}")
            raise StorageError(
                f"Supabase {method} failed ({response.status_code}): {error_detail}", public_message
            )
        return response

    async def get(self, share_id: str) -> Optional[PortfolioRecord]:
        response = await self._request(
            "GET",
            LOAD_FAILED_MESSAGE,
            params={"share_id": f"eq.{share_id}", "select": "*"},
        )
        rows = response.json()
        if not rows:
            return None
        return record_from_row(rows[0])

    async def put(self, record: PortfolioRecord) -> None:
        await self._request(
            "POST",
            json=self._serialize(record),
            headers={"Prefer": "return=minimal"},
        )

    async def update(self, record: PortfolioRecord) -> bool:
        row = self._serialize(record)
        row.pop("share_id")
        row.pop("created_at")
        response = await self._request(
            "PATCH",
            params={"share_id": f"eq.{record.share_id}"},
            json=row,
            headers={"Prefer": "return=representation"},
        )
        return bool(response.json())

    async def close(self) -> None:
        await self.client.aclose()
