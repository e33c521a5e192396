class UnknownStage(LookupError):
	"""Raised when a stage id is not part of the catalog."""

	def __init__(self, stage_id):
		super().__init__(f"Unknown stage id: {stage_id!r}")
		self.stage_id = stage_id


class StageConfigError(ValueError):
	"""Raised when a stage catalog definition is invalid."""


class HistoryStoreError(RuntimeError):
	"""Raised when the history database cannot be read or written."""
