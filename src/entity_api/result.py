"""
Result collection returned by every action
"""

from typing import Any, Dict, List, Optional


class Result(list):
    """List of result rows with a few query-style helpers"""

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        entity: Optional[str] = None,
        action: Optional[str] = None,
        row_count: Optional[int] = None,
        debug: Optional[Dict[str, Any]] = None
    ):
        super().__init__(rows or [])
        self.entity = entity
        self.action = action
        self.row_count = row_count
        self.debug = debug

    def first(self) -> Optional[Dict[str, Any]]:
        return self[0] if self else None

    def last(self) -> Optional[Dict[str, Any]]:
        return self[-1] if self else None

    def single(self) -> Dict[str, Any]:
        """The only row; raises if there is not exactly one"""
        if len(self) != 1:
            raise ValueError(f"Expected to find one {self.entity} record, but there were {len(self)}.")
        return self[0]

    def count(self) -> int:
        """Row count when selectRowCount was used, otherwise the number of rows"""
        if self.row_count is not None:
            return self.row_count
        return len(self)

    def column(self, name: str) -> List[Any]:
        return [row.get(name) for row in self]

    def index_by(self, key: str) -> Dict[Any, Dict[str, Any]]:
        return {row[key]: row for row in self}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity,
            "action": self.action,
            "values": list(self),
            "count": self.count(),
            "debug": self.debug,
        }
