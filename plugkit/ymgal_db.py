"""Local store of galgame picture sets, kept in an SQLite database."""

from __future__ import annotations

import random as _random
import sqlite3
from dataclasses import dataclass
from pathlib import Path

_COLUMNS = "id, title, picture_type, picture_description, picture_list"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ymgal (
    id integer primary key,
    title varchar(255),
    picture_type varchar(255),
    picture_description varchar(1024),
    picture_list varchar(20000)
)
"""


@dataclass
class Ymgal:
    """One picture set: its id, title, type, description and picture addresses."""

    id: int
    title: str = ""
    picture_type: str = ""
    picture_description: str = ""
    picture_list: str = ""

    def pictures(self) -> list[str]:
        """The picture addresses of the set, in order."""
        if not self.picture_list:
            return []
        return self.picture_list.split(",")


def _row_to_entry(row) -> Ymgal | None:
    if row is None:
        return None
    picset_id, title, picture_type, description, picture_list = row
    return Ymgal(
        id=picset_id,
        title=title or "",
        picture_type=picture_type or "",
        picture_description=description or "",
        picture_list=picture_list or "",
    )


class YmgalDB:
    """Picture sets stored in one SQLite file."""

    def __init__(self, path) -> None:
        self.path = Path(path)
        self.path.touch(exist_ok=True)
        self._conn = sqlite3.connect(str(self.path), check_same_thread=False)
        with self._conn:
            self._conn.execute(_SCHEMA)

    def close(self) -> None:
        """Close the database."""
        self._conn.close()

    def __enter__(self) -> YmgalDB:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def upsert(self, entry: Ymgal) -> None:
        """Insert a picture set, or overwrite the one with the same id."""
        with self._conn:
            found = self._conn.execute(
                "SELECT 1 FROM ymgal WHERE id = ?", (entry.id,)
            ).fetchone()
            if found is None:
                self._conn.execute(
                    f"INSERT INTO ymgal ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    (
                        entry.id,
                        entry.title,
                        entry.picture_type,
                        entry.picture_description,
                        entry.picture_list,
                    ),
                )
            else:
                self._conn.execute(
                    "UPDATE ymgal SET title = ?, picture_type = ?, "
                    "picture_description = ?, picture_list = ? WHERE id = ?",
                    (
                        entry.title,
                        entry.picture_type,
                        entry.picture_description,
                        entry.picture_list,
                        entry.id,
                    ),
                )

    def get_by_id(self, picset_id) -> Ymgal | None:
        """The picture set with this id, or None."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE id = ? LIMIT 1", (int(picset_id),)
        ).fetchone()
        return _row_to_entry(row)

    def _pick(self, where: str, params: tuple) -> Ymgal | None:
        (count,) = self._conn.execute(
            f"SELECT COUNT(*) FROM ymgal WHERE {where}", params
        ).fetchone()
        if count == 0:
            return None
        offset = _random.randrange(count)
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE {where} LIMIT 1 OFFSET ?",
            (*params, offset),
        ).fetchone()
        return _row_to_entry(row)

    def random(self, picture_type: str) -> Ymgal | None:
        """A random picture set of the given type, or None if there is none."""
        return self._pick("picture_type = ?", (picture_type,))

    def search(self, picture_type: str, key: str) -> Ymgal | None:
        """A random set of the type whose title or description holds the key."""
        pattern = f"%{key}%"
        return self._pick(
            "picture_type = ? AND (picture_description LIKE ? OR title LIKE ?)",
            (picture_type, pattern, pattern),
        )