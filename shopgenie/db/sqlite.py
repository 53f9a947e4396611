from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime
from typing import Any, Optional

from shopgenie.config import settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.sql")


class PersistenceGateway:
    """
    Best-effort хранилище снимков: key -> JSON в одной таблице kv.
    Ошибки чтения/записи логируются и никогда не пробрасываются наружу.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or settings.db_path
        self.available = False

    def _connect(self) -> sqlite3.Connection:
        parent = os.path.dirname(self.db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> bool:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError):
            logger.exception("cannot open %s, state stays in memory", self.db_path)
            self.available = False
            return False
        try:
            with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
                conn.executescript(f.read())
            conn.commit()
            self.available = True
        except (sqlite3.Error, OSError):
            logger.exception("cannot create schema in %s, state stays in memory", self.db_path)
            self.available = False
        finally:
            conn.close()
        return self.available

    def load(self, key: str) -> Any:
        """Decoded snapshot for `key`, or None when missing or unreadable."""
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError):
            logger.warning("read of %r failed: storage unavailable", key)
            return None
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            logger.warning("read of %r failed: %s", key, e)
            return None
        finally:
            conn.close()

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except (TypeError, ValueError):
            logger.warning("stored %r is not valid JSON, ignoring it", key)
            return None

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning("cannot serialize %r: %s", key, e)
            return False

        # схема могла не создаться при старте: пробуем ещё раз
        if not self.available and not self.init_db():
            return False

        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as e:
            logger.warning("write of %r failed: %s", key, e)
            return False
        try:
            conn.execute(
                "INSERT INTO kv(key, value, updated_at) VALUES(?,?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, payload, updated_at),
            )
            conn.commit()
            return True
        except sqlite3.Error as e:
            logger.warning("write of %r failed: %s", key, e)
            return False
        finally:
            conn.close()

    def delete(self, key: str) -> bool:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as e:
            logger.warning("delete of %r failed: %s", key, e)
            return False
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
            return True
        except sqlite3.Error as e:
            logger.warning("delete of %r failed: %s", key, e)
            return False
        finally:
            conn.close()


class MemoryGateway(PersistenceGateway):
    """Same contract without a file; used for tests and ephemeral sessions."""

    def __init__(self) -> None:
        super().__init__(db_path=":memory:")
        self.rows: dict[str, str] = {}

    def init_db(self) -> bool:
        self.available = True
        return True

    def load(self, key: str) -> Any:
        raw = self.rows.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("stored %r is not valid JSON, ignoring it", key)
            return None

    def save(self, key: str, value: Any) -> bool:
        try:
            self.rows[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning("cannot serialize %r: %s", key, e)
            return False
        return True

    def delete(self, key: str) -> bool:
        self.rows.pop(key, None)
        return True
