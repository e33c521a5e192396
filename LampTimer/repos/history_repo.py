import datetime
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from LampTimer.core.paths import db_path
from LampTimer.core.clock import utc_now_iso
from LampTimer.core.errors import HistoryStoreError
from LampTimer.services.history_tracker import DayRecord

SCHEMA_PATH = Path(__file__).parent.parent.parent / "SQL" / "schema.sql"

logger = logging.getLogger(__name__)


class SqliteHistoryStore:
	"""Day records kept in a SQLite file, one row per local date."""

	def __init__(self, path=None):
		self.path = Path(path) if path is not None else db_path()

	def connect(self):
		"""Open SQLite connection and ensure schema is applied."""
		try:
			conn = sqlite3.connect(self.path)
			conn.row_factory = sqlite3.Row
			with open(SCHEMA_PATH, encoding="utf-8") as f:
				conn.executescript(f.read())
		except (sqlite3.Error, OSError) as exc:
			raise HistoryStoreError(f"Cannot open history database {self.path}: {exc}") from exc
		return conn

	def load_days(self):
		"""Return all stored DayRecords, oldest first."""
		try:
			with closing(self.connect()) as conn, conn:
				cur = conn.execute("SELECT local_date, completed FROM days ORDER BY local_date ASC")
				rows = cur.fetchall()
		except sqlite3.Error as exc:
			raise HistoryStoreError(f"Failed to read history: {exc}") from exc
		records = []
		for row in rows:
			try:
				day = datetime.date.fromisoformat(row["local_date"])
			except ValueError:
				logger.warning("Skipping history row with bad date %r", row["local_date"])
				continue
			records.append(DayRecord(day, bool(row["completed"])))
		return records

	def save_day(self, record):
		"""Insert or update the row for record.date. A completed day stays completed."""
		try:
			with closing(self.connect()) as conn, conn:
				conn.execute(
					"""
					INSERT INTO days (local_date, completed, updated_at) VALUES (?, ?, ?)
					ON CONFLICT(local_date) DO UPDATE SET
						completed = MAX(days.completed, excluded.completed),
						updated_at = excluded.updated_at
					""",
					(record.date.isoformat(), int(bool(record.completed)), utc_now_iso())
				)
		except sqlite3.Error as exc:
			raise HistoryStoreError(f"Failed to save {record.date.isoformat()}: {exc}") from exc

	def clear_days(self):
		"""Delete every stored day. Returns the number of rows removed."""
		try:
			with closing(self.connect()) as conn, conn:
				cur = conn.execute("DELETE FROM days")
				return cur.rowcount
		except sqlite3.Error as exc:
			raise HistoryStoreError(f"Failed to clear history: {exc}") from exc
