"""
In-memory datastore for local development.
"""

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from feedbackhub.storage.base import Datastore, Row, parse_order


logger = logging.getLogger(__name__)


class InMemoryDatastore(Datastore):
    """
    Datastore that keeps rows in process memory.

    Mimics the hosted database defaults: every inserted row gets a UUID `id`
    and a UTC `created_at`.
    """

    def __init__(self):
        self.tables: Dict[str, List[Row]] = {}

    async def select(self,
                     table: str,
                     filters: Optional[Dict[str, Any]] = None,
                     order: Optional[str] = None,
                     limit: Optional[int] = None) -> List[Row]:
        rows = [
            row for row in self.tables.get(table, [])
            if all(row.get(column) == value for column, value in (filters or {}).items())
        ]

        ordering = parse_order(order)
        if ordering:
            column, descending = ordering
            if descending:
                # Later inserts come first when timestamps tie
                rows = list(reversed(rows))
            rows = sorted(rows, key=lambda row: row.get(column), reverse=descending)

        if limit is not None:
            rows = rows[:limit]

        return copy.deepcopy(rows)

    async def insert(self, table: str, row: Row) -> Row:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", datetime.now(timezone.utc))

        self.tables.setdefault(table, []).append(stored)
        logger.debug(f"Stored row {stored['id']} in {table}")
        return copy.deepcopy(stored)
