import datetime
import logging
from dataclasses import dataclass

from LampTimer.core.clock import local_today
from LampTimer.core.errors import HistoryStoreError

logger = logging.getLogger(__name__)


@dataclass
class DayRecord:
	date: datetime.date
	completed: bool = False


class DailyHistoryTracker:
	"""Calendar of days, one record per date, each completed or not."""

	def __init__(self, records=(), today=None, store=None):
		self._today = today or local_today
		self._store = store
		self._days = {}
		initial = list(records)
		if store is not None:
			initial.extend(store.load_days())
		for record in initial:
			# duplicate dates collapse into one record; completed wins
			existing = self._days.get(record.date)
			if existing is None:
				self._days[record.date] = DayRecord(record.date, bool(record.completed))
			else:
				existing.completed = existing.completed or bool(record.completed)

	def today(self):
		return self._today()

	def history(self):
		"""Return day records oldest first."""
		return [DayRecord(d, self._days[d].completed) for d in sorted(self._days)]

	def today_record(self):
		record = self._days.get(self._today())
		return DayRecord(record.date, record.completed) if record else None

	def ensure_today(self):
		"""Create an incomplete record for today if there is none yet."""
		today = self._today()
		if today not in self._days:
			self._days[today] = DayRecord(today, False)
			self._save(self._days[today])
		return DayRecord(today, self._days[today].completed)

	def record_today(self, completed: bool):
		"""Find or create today's record and set its completed flag."""
		today = self._today()
		record = self._days.get(today)
		if record is None:
			record = DayRecord(today, False)
			self._days[today] = record
		# a completed day never reverts
		record.completed = record.completed or bool(completed)
		self._save(record)
		logger.info("Recorded %s as %s", today.isoformat(), "completed" if record.completed else "open")
		return DayRecord(record.date, record.completed)

	def total_completed_days(self):
		return sum(1 for record in self._days.values() if record.completed)

	def current_streak(self):
		"""
		Count consecutive completed days ending today.
		An unfinished today does not break the streak; it just isn't counted yet.
		"""
		current = self._today()
		today_record = self._days.get(current)
		if today_record is None or not today_record.completed:
			current -= datetime.timedelta(days=1)
		streak = 0
		while True:
			record = self._days.get(current)
			if record is None or not record.completed:
				break
			streak += 1
			current -= datetime.timedelta(days=1)
		return streak

	def _save(self, record):
		if self._store is None:
			return
		try:
			self._store.save_day(DayRecord(record.date, record.completed))
		except HistoryStoreError:
			# in-memory history stays authoritative
			logger.exception("Failed to persist day record for %s", record.date.isoformat())
