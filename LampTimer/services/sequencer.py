import logging

logger = logging.getLogger(__name__)


class StageSequencer:
	"""Tracks the active stage and the set of stages completed today.

	Every change of active stage reloads the countdown with that stage's full
	duration and stops it; partial progress is never carried across a switch.
	"""

	def __init__(self, catalog, countdown):
		self.catalog = catalog
		self.countdown = countdown
		self._completed = set()
		self.active_stage_id = catalog.first().id
		self._load_active()

	def _load_active(self):
		stage = self.active_stage()
		self.countdown.reset(stage.duration_seconds, stage.id)

	@property
	def completed_stage_ids(self):
		return frozenset(self._completed)

	def active_stage(self):
		return self.catalog.by_id(self.active_stage_id)

	def select_stage(self, stage_id):
		# lookup first so an unknown id leaves everything untouched
		stage = self.catalog.by_id(stage_id)
		self.active_stage_id = stage.id
		self._load_active()
		logger.debug("Selected stage %s", stage.id)

	def mark_completed(self, stage_id):
		"""Add stage_id to today's completions without moving the active stage."""
		self.catalog.index_of(stage_id)
		self._completed.add(stage_id)

	def complete_active(self):
		"""Complete the active stage and advance to the next one in catalog order."""
		self.mark_completed(self.active_stage_id)
		successor = self.catalog.next_after(self.active_stage_id)
		if successor is None:
			# terminal stage: stay put, just stop the countdown
			self.countdown.pause()
			return
		self.active_stage_id = successor.id
		self._load_active()
		logger.debug("Advanced to stage %s", successor.id)

	def completion_ratio(self):
		return len(self._completed) / len(self.catalog)

	def is_fully_complete(self):
		return self._completed == set(self.catalog.ids())

	def reset_all(self):
		self._completed.clear()
		self.active_stage_id = self.catalog.first().id
		self._load_active()
