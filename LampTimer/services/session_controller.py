import logging
from dataclasses import dataclass, asdict

from PySide6.QtCore import QObject, Signal

from LampTimer.core.clock import fmt_mmss
from LampTimer.core.stages import default_catalog
from LampTimer.services.countdown_service import CountdownService
from LampTimer.services.history_tracker import DailyHistoryTracker
from LampTimer.services.sequencer import StageSequencer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
	"""Read-only copy of the session state, also used to save and restore it."""
	date: str
	active_stage_id: str
	remaining_seconds: int
	is_running: bool
	completed_stage_ids: tuple

	def to_dict(self):
		data = asdict(self)
		data["completed_stage_ids"] = list(self.completed_stage_ids)
		return data

	@classmethod
	def from_dict(cls, data):
		return cls(
			date=str(data["date"]),
			active_stage_id=str(data["active_stage_id"]),
			remaining_seconds=int(data["remaining_seconds"]),
			is_running=bool(data.get("is_running", False)),
			completed_stage_ids=tuple(str(stage_id) for stage_id in data.get("completed_stage_ids", ())),
		)


class SessionController(QObject):
	changed = Signal()  # any state mutation
	remaining_changed = Signal(int)
	stage_expired = Signal(str)
	day_completed = Signal(str)  # ISO date of the day that just closed out

	def __init__(self, catalog=None, history=None, complete_on_expiry=False, parent=None):
		super().__init__(parent)
		self.catalog = catalog or default_catalog()
		self.history_tracker = history or DailyHistoryTracker()
		self.complete_on_expiry = complete_on_expiry
		self.countdown = CountdownService(parent=self)
		self.sequencer = StageSequencer(self.catalog, self.countdown)
		self.countdown.remaining_changed.connect(self.remaining_changed)
		self.countdown.stage_expired.connect(self._on_stage_expired)

	# --- operations ---

	def start(self):
		self.countdown.start()
		self.changed.emit()

	def pause(self):
		self.countdown.pause()
		self.changed.emit()

	def toggle(self):
		"""Pause when running, otherwise continue."""
		if self.countdown.running:
			self.pause()
		else:
			self.start()

	def reset_current_stage(self):
		stage = self.sequencer.active_stage()
		self.countdown.reset(stage.duration_seconds, stage.id)
		self.changed.emit()

	def select_stage(self, stage_id):
		"""Switch to stage_id. Raises UnknownStage and changes nothing if it isn't in the catalog."""
		self.sequencer.select_stage(stage_id)
		self.changed.emit()

	def complete_and_advance(self):
		was_complete = self.sequencer.is_fully_complete()
		self.sequencer.complete_active()
		self._close_day_if_done(was_complete)
		self.changed.emit()

	def new_day(self):
		self.sequencer.reset_all()
		logger.info("Started a new day")
		self.changed.emit()

	def restore(self, snapshot):
		"""Re-apply a saved snapshot. The restored countdown is always paused."""
		self.catalog.index_of(snapshot.active_stage_id)
		completed = [stage_id for stage_id in snapshot.completed_stage_ids if stage_id in self.catalog]
		self.sequencer.reset_all()
		for stage_id in completed:
			self.sequencer.mark_completed(stage_id)
		self.sequencer.select_stage(snapshot.active_stage_id)
		self.countdown.restore(snapshot.remaining_seconds)
		# a fully completed snapshot still closes out today if the record was lost
		record = self.history_tracker.today_record()
		self._close_day_if_done(record is not None and record.completed)
		self.changed.emit()

	# --- projections ---

	@property
	def time_remaining(self):
		return self.countdown.remaining_seconds

	@property
	def time_remaining_text(self):
		return fmt_mmss(self.countdown.remaining_seconds)

	@property
	def active_stage(self):
		return self.sequencer.active_stage()

	@property
	def completed_stage_ids(self):
		return self.sequencer.completed_stage_ids

	@property
	def overall_progress(self):
		"""Share of stages completed today as a 0-100 percentage."""
		return self.sequencer.completion_ratio() * 100

	@property
	def stage_progress(self):
		return self.countdown.progress()

	@property
	def is_running(self):
		return self.countdown.running

	@property
	def history(self):
		return self.history_tracker.history()

	def snapshot(self, today=None):
		today = today or self.history_tracker.today()
		return SessionSnapshot(
			date=today.isoformat(),
			active_stage_id=self.sequencer.active_stage_id,
			remaining_seconds=self.countdown.remaining_seconds,
			is_running=self.countdown.running,
			completed_stage_ids=tuple(stage.id for stage in self.catalog if stage.id in self.completed_stage_ids),
		)

	# --- internals ---

	def _close_day_if_done(self, was_complete):
		if was_complete or not self.sequencer.is_fully_complete():
			return
		record = self.history_tracker.record_today(True)
		self.day_completed.emit(record.date.isoformat())

	def _on_stage_expired(self, stage_id):
		if self.complete_on_expiry:
			was_complete = self.sequencer.is_fully_complete()
			self.sequencer.mark_completed(stage_id)
			self._close_day_if_done(was_complete)
		self.stage_expired.emit(stage_id)
		self.changed.emit()
