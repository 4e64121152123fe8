from __future__ import annotations
import json
import logging
import sqlite3
from typing import Any, Dict, Iterable, Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)

LOCAL = "local"


class Repository(QObject):
    """JSON key-value store; `changed(area, changes)` fires only on real changes."""

    changed = Signal(str, object)

    def __init__(self, conn: sqlite3.Connection, area: str = LOCAL, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.conn = conn
        self.area = area

    def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        marks = ",".join("?" for _ in keys)
        rows = self.conn.execute(
            f"SELECT key, value FROM storage WHERE area=? AND key IN ({marks})",
            (self.area, *keys),
        ).fetchall()
        out: Dict[str, Any] = {}
        for r in rows:
            try:
                out[r["key"]] = json.loads(r["value"])
            except ValueError:
                # written by something else; treat as missing
                logger.warning("ignoring undecodable value for %s/%s", self.area, r["key"])
        return out

    def get_value(self, key: str, default: Any = None) -> Any:
        return self.get([key]).get(key, default)

    def set(self, items: Dict[str, Any]) -> None:
        old = self.get(items.keys())
        changes: Dict[str, Dict[str, Any]] = {}

        for key, value in items.items():
            encoded = json.dumps(value, sort_keys=True)
            self.conn.execute(
                "INSERT INTO storage(area,key,value) VALUES(?,?,?) "
                "ON CONFLICT(area,key) DO UPDATE SET value=excluded.value",
                (self.area, key, encoded),
            )
            if key not in old or old[key] != json.loads(encoded):
                changes[key] = {"oldValue": old.get(key), "newValue": value}
        self.conn.commit()

        if changes:
            self.changed.emit(self.area, changes)

    def remove(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        old = self.get(keys)
        for key in keys:
            self.conn.execute("DELETE FROM storage WHERE area=? AND key=?", (self.area, key))
        self.conn.commit()

        if old:
            self.changed.emit(self.area, {k: {"oldValue": v, "newValue": None} for k, v in old.items()})
