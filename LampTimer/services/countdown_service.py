import logging

from PySide6.QtCore import QObject, Signal, QTimer

from LampTimer.core.settings import TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


class CountdownService(QObject):
	remaining_changed = Signal(int)  # emits remaining seconds
	state_changed = Signal(str)  # emits 'idle', 'running', 'paused', 'expired'
	stage_expired = Signal(str)  # emits the id of the stage that ran out

	def __init__(self, duration_seconds=0, stage_id="", parent=None):
		super().__init__(parent)
		self.running = False
		self.stage_id = stage_id
		self.total_seconds = int(duration_seconds)
		self.remaining_seconds = int(duration_seconds)
		self._timer = QTimer(self)
		self._timer.setInterval(TICK_INTERVAL_MS)
		self._timer.timeout.connect(self.tick)

	@property
	def elapsed_seconds(self):
		return self.total_seconds - self.remaining_seconds

	def progress(self):
		"""Fraction of the current stage already elapsed, in [0, 1]."""
		if self.total_seconds <= 0:
			return 0.0
		return self.elapsed_seconds / self.total_seconds

	def start(self):
		if self.running or self.remaining_seconds <= 0:
			return
		self.running = True
		self._timer.start()
		self.state_changed.emit('running')

	def pause(self):
		self._timer.stop()
		if not self.running:
			return
		self.running = False
		self.state_changed.emit('paused')

	def reset(self, to_duration, stage_id=None):
		"""Stop ticking and load a fresh countdown of to_duration seconds."""
		self._timer.stop()
		if stage_id is not None:
			self.stage_id = stage_id
		self.running = False
		self.total_seconds = int(to_duration)
		self.remaining_seconds = int(to_duration)
		self.remaining_changed.emit(self.remaining_seconds)
		self.state_changed.emit('idle')

	def restore(self, remaining_seconds):
		"""Set remaining time for the loaded stage, clamped to its duration. Never starts."""
		self._timer.stop()
		self.running = False
		self.remaining_seconds = max(0, min(int(remaining_seconds), self.total_seconds))
		self.remaining_changed.emit(self.remaining_seconds)
		self.state_changed.emit('paused' if self.remaining_seconds else 'expired')

	def tick(self):
		# a timeout already queued before stop() must not touch the new state
		if not self.running:
			return
		self.remaining_seconds = max(0, self.remaining_seconds - 1)
		self.remaining_changed.emit(self.remaining_seconds)
		if self.remaining_seconds == 0:
			self._timer.stop()
			self.running = False
			logger.info("Stage %s expired", self.stage_id)
			self.state_changed.emit('expired')
			self.stage_expired.emit(self.stage_id)
