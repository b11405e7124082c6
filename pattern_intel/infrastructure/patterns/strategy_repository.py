"""
Adapter: Strategy repository.

Implements StrategyRepository port.
Reads strategies from the PostgreSQL strategies table. Read-only.
"""

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from pattern_intel.domain.patterns.entities import StrategyRecord
from pattern_intel.domain.patterns.ports import StrategyRepository
from pattern_intel.infrastructure.patterns.row_mapping import (
    load_json,
    parse_uuid,
    to_str,
)

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, name, description, status, config, created_at, updated_at"


def _to_strategy(row: Mapping[str, Any]) -> StrategyRecord:
    config = load_json(row["config"])
    tier = config.get("tier")
    return StrategyRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=row["name"],
        description=row["description"],
        config=config,
        status=row["status"],
        tier=to_str(tier),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class StrategyRepositoryAdapter(StrategyRepository):
    """Reads strategies from PostgreSQL.

    The subscription tier of a strategy is read from `config.tier`.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def find_by_id(self, strategy_id: str) -> Optional[StrategyRecord]:
        """Return a strategy by its ID, or None if not found."""
        key = parse_uuid(strategy_id)
        if key is None:
            return None

        query = text(f"SELECT {_COLUMNS} FROM strategies WHERE id = :id")

        async with self._engine.connect() as conn:
            result = await conn.execute(query, {"id": key})
            row = result.mappings().first()

        if row is None:
            return None
        return _to_strategy(row)

    async def find_by_user_id(self, user_id: str) -> list[StrategyRecord]:
        """Return every strategy owned by a user, oldest first."""
        key = parse_uuid(user_id)
        if key is None:
            return []

        query = text(
            f"""
            SELECT {_COLUMNS}
            FROM strategies
            WHERE user_id = :user_id
            ORDER BY created_at ASC
            """
        )

        async with self._engine.connect() as conn:
            result = await conn.execute(query, {"user_id": key})
            rows = result.mappings().all()

        strategies = [_to_strategy(row) for row in rows]
        logger.info("Fetched %d strategies for user=%s", len(strategies), user_id)
        return strategies
