"""LAMP stage definitions and the ordered stage catalog."""
import json
import logging
from dataclasses import dataclass

from LampTimer.core.errors import StageConfigError, UnknownStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
	id: str
	label: str
	full_name: str
	duration_seconds: int
	description: str = ""


LAMP_STAGES = (
	Stage("L", "L", "List", 40 * 60, "Compile a list of possible employers"),
	Stage("A", "A", "Alumni", 10 * 60, "Identify Alumni"),
	Stage("M", "M", "Motivation", 5 * 60, "Assess Motivation"),
	Stage("P1", "P", "Postings", 15 * 60, "Classify postings"),
	Stage("P2", "P", "Prioritize", 20 * 60, "Sort and prioritize"),
	Stage("O", "O", "Outreach", 30 * 60, "Outreach for the rest of the time"),
)


class StageCatalog:
	"""Immutable ordered sequence of stages; order defines progression."""

	def __init__(self, stages):
		stages = tuple(stages)
		if not stages:
			raise StageConfigError("Stage catalog must contain at least one stage")
		seen = set()
		for stage in stages:
			if not isinstance(stage.id, str) or not stage.id.strip():
				raise StageConfigError("Stage id must be a non-empty string")
			if stage.id in seen:
				raise StageConfigError(f"Duplicate stage id: {stage.id!r}")
			duration = stage.duration_seconds
			# bool is an int subclass
			if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
				raise StageConfigError(
					f"Stage {stage.id!r} duration must be a positive integer number of seconds, got {duration!r}"
				)
			seen.add(stage.id)
		self._stages = stages
		self._index = {stage.id: i for i, stage in enumerate(stages)}

	def stages(self):
		return self._stages

	def ids(self):
		return frozenset(self._index)

	def by_id(self, stage_id):
		return self._stages[self.index_of(stage_id)]

	def index_of(self, stage_id):
		try:
			return self._index[stage_id]
		except (KeyError, TypeError) as exc:
			raise UnknownStage(stage_id) from exc

	def first(self):
		return self._stages[0]

	def is_last(self, stage_id):
		return self.index_of(stage_id) == len(self._stages) - 1

	def next_after(self, stage_id):
		"""Return the stage following stage_id in catalog order, or None for the last one."""
		i = self.index_of(stage_id)
		if i + 1 < len(self._stages):
			return self._stages[i + 1]
		return None

	def __contains__(self, stage_id):
		try:
			return stage_id in self._index
		except TypeError:
			return False

	def __iter__(self):
		return iter(self._stages)

	def __len__(self):
		return len(self._stages)


def default_catalog():
	"""Return the built-in LAMP catalog."""
	return StageCatalog(LAMP_STAGES)


def _stage_from_dict(entry):
	if not isinstance(entry, dict):
		raise StageConfigError(f"Stage entry must be an object, got {type(entry).__name__}")
	try:
		stage_id = entry["id"]
	except KeyError as exc:
		raise StageConfigError("Stage entry is missing 'id'") from exc
	if "duration_seconds" in entry:
		duration = entry["duration_seconds"]
	elif "duration_minutes" in entry:
		minutes = entry["duration_minutes"]
		if isinstance(minutes, bool) or not isinstance(minutes, int):
			raise StageConfigError(f"Stage {stage_id!r} duration_minutes must be an integer")
		duration = minutes * 60
	else:
		raise StageConfigError(f"Stage {stage_id!r} has no duration_seconds or duration_minutes")
	return Stage(
		id=stage_id,
		label=entry.get("label", stage_id),
		full_name=entry.get("full_name", stage_id),
		duration_seconds=duration,
		description=entry.get("description", ""),
	)


def load_catalog(path):
	"""Load a catalog from a JSON list of stage objects."""
	try:
		with open(path, "r", encoding="utf-8") as f:
			document = json.load(f)
	except (OSError, json.JSONDecodeError) as exc:
		raise StageConfigError(f"Failed to read stage catalog {path}: {exc}") from exc
	if not isinstance(document, list):
		raise StageConfigError(f"Stage catalog {path} must be a JSON list")
	catalog = StageCatalog(_stage_from_dict(entry) for entry in document)
	logger.info("Loaded %d stages from %s", len(catalog), path)
	return catalog
