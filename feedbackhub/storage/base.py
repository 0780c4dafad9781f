"""
Datastore interface.

Managers talk to the relational datastore through this small table-oriented
interface, so the hosted REST backend and the in-memory backend are
interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

PROJECTS_TABLE = "projects"
FEEDBACK_TABLE = "feedback"

Row = Dict[str, Any]


class Datastore(ABC):
    """Abstract table store with equality filters."""

    @abstractmethod
    async def select(self,
                     table: str,
                     filters: Optional[Dict[str, Any]] = None,
                     order: Optional[str] = None,
                     limit: Optional[int] = None) -> List[Row]:
        """
        Select rows from a table.

        Args:
            table: Table name
            filters: Column equality filters, all of which must match
            order: Ordering as "<column>.asc" or "<column>.desc"
            limit: Maximum number of rows to return

        Returns:
            Matching rows

        Raises:
            PersistenceError: If the datastore call fails
        """

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row:
        """
        Insert a single row and return it as stored (with id and created_at).

        Raises:
            PersistenceError: If the datastore call fails
        """

    async def select_one(self, table: str, filters: Dict[str, Any]) -> Optional[Row]:
        """Return the first row matching the filters, or None."""
        rows = await self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None

    async def ping(self) -> Dict[str, str]:
        """
        Check that each table can be read.

        Returns:
            Mapping of table name to "connected" or an error description
        """
        status = {}
        for table in (PROJECTS_TABLE, FEEDBACK_TABLE):
            try:
                await self.select(table, limit=1)
                status[table] = "connected"
            except Exception as e:
                status[table] = f"error: {e}"
        return status

    async def close(self) -> None:
        """Release any held connections."""
        return None


def parse_order(order: Optional[str]) -> Optional[tuple]:
    """Split "<column>.<direction>" into (column, descending)."""
    if not order:
        return None
    column, _, direction = order.partition(".")
    return column, direction.lower() == "desc"
