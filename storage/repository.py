from __future__ import annotations  # Generic keyed entity collection over SQLite

import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, ClassVar, Dict, Generic, Iterator, List, Mapping, NamedTuple, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .sqlite import get_conn


T = TypeVar("T", bound=BaseModel)


def utcnow() -> datetime:  # Timezone-aware current timestamp
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:  # Treat naive timestamps as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def new_id() -> str:  # Random record identifier
    return str(uuid.uuid4())


class ScanRow(NamedTuple):  # Raw row outcome from a lenient scan
    record_id: str
    entity: Optional[BaseModel]
    error: Optional[str]


class EntityStore(Generic[T]):  # SQLite-backed keyed collection for one entity type
    table: ClassVar[str]
    model: ClassVar[Type[BaseModel]]
    columns: ClassVar[Tuple[str, ...]] = ()
    touch_field: ClassVar[Optional[str]] = "updated_at"

    def __init__(self, path: Union[str, Path]) -> None:  # Bind store to a database file
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, entity: T) -> T:  # Insert or replace a record by id
        record_id = getattr(entity, "id", None)
        if not record_id:
            raise ValueError(f"{self.model.__name__} requires a non-empty id")
        with get_conn(self._path) as conn:
            exists = self._exists(conn, record_id)
            if exists and self.touch_field:
                entity = entity.model_copy(update={self.touch_field: utcnow()})
            self._write(conn, entity)
        return entity

    def get(self, record_id: str) -> Optional[T]:  # Load a record or None
        with get_conn(self._path) as conn:
            row = conn.execute(
                f"SELECT payload_json FROM {self.table} WHERE id = ?",
                (record_id,),
            ).fetchone()
        if row is None:
            return None
        return self.model.model_validate_json(row["payload_json"])  # type: ignore[return-value]

    def list(self) -> List[T]:  # Load every record in insertion order
        with get_conn(self._path) as conn:
            rows = conn.execute(f"SELECT payload_json FROM {self.table} ORDER BY rowid ASC").fetchall()
        return [self.model.model_validate_json(row["payload_json"]) for row in rows]  # type: ignore[misc]

    def update(self, record_id: str, changes: Mapping[str, Any]) -> Optional[T]:  # Merge a partial update
        if "id" in changes and changes["id"] != record_id:
            raise ValueError("Record id cannot be changed")
        unknown = set(changes) - set(self.model.model_fields)
        if unknown:
            raise ValueError(f"Unknown {self.model.__name__} fields: {', '.join(sorted(unknown))}")
        with get_conn(self._path) as conn:
            row = conn.execute(
                f"SELECT payload_json FROM {self.table} WHERE id = ?",
                (record_id,),
            ).fetchone()
            if row is None:
                return None
            current = self.model.model_validate_json(row["payload_json"])
            merged: Dict[str, Any] = {name: getattr(current, name) for name in self.model.model_fields}
            merged.update(changes)
            if self.touch_field:
                merged[self.touch_field] = utcnow()
            entity = self.model.model_validate(merged)
            self._write(conn, entity)
        return entity  # type: ignore[return-value]

    def delete(self, record_id: str) -> bool:  # Remove a record; False when absent
        with get_conn(self._path) as conn:
            cur = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            return cur.rowcount > 0

    def count(self) -> int:
        with get_conn(self._path) as conn:
            return int(conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0])

    def scan(self) -> Iterator[ScanRow]:  # Lenient single pass that never raises on bad rows
        with get_conn(self._path) as conn:
            rows = conn.execute(f"SELECT id, payload_json FROM {self.table} ORDER BY rowid ASC").fetchall()
        for row in rows:
            try:
                entity = self.model.model_validate_json(row["payload_json"])
            except ValidationError as exc:
                yield ScanRow(record_id=row["id"] or "", entity=None, error=str(exc))
                continue
            yield ScanRow(record_id=row["id"] or "", entity=entity, error=None)

    def _find_by(self, column: str, value: Any, *, order_by: str = "rowid") -> List[T]:  # Indexed finder
        if column not in self.columns:
            raise ValueError(f"Column '{column}' is not indexed on {self.table}")
        with get_conn(self._path) as conn:
            rows = conn.execute(
                f"SELECT payload_json FROM {self.table} WHERE {column} = ? ORDER BY {order_by} ASC",
                (value,),
            ).fetchall()
        return [self.model.model_validate_json(row["payload_json"]) for row in rows]  # type: ignore[misc]

    def _exists(self, conn: sqlite3.Connection, record_id: str) -> bool:
        row = conn.execute(f"SELECT 1 FROM {self.table} WHERE id = ?", (record_id,)).fetchone()
        return row is not None

    def _write(self, conn: sqlite3.Connection, entity: BaseModel) -> None:  # Upsert payload and finder columns
        dumped = entity.model_dump(mode="json")
        names = ("id",) + self.columns + ("payload_json",)
        values = [dumped.get("id")] + [dumped.get(column) for column in self.columns] + [entity.model_dump_json()]
        placeholders = ", ".join("?" for _ in names)
        assignments = ", ".join(f"{name} = excluded.{name}" for name in names if name != "id")
        conn.execute(
            f"""
            INSERT INTO {self.table} ({", ".join(names)})
            VALUES ({placeholders})
            ON CONFLICT(id) DO UPDATE SET {assignments}
            """,
            values,
        )


__all__ = ["EntityStore", "ScanRow", "as_utc", "new_id", "utcnow"]
