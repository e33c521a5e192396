import json
import logging
from pathlib import Path
from LampTimer.core.paths import state_path
from LampTimer.services.session_controller import SessionSnapshot

logger = logging.getLogger(__name__)

def save_snapshot(snapshot, path=None):
	"""Persist a session snapshot to disk so a paused session survives a restart."""
	path = Path(path) if path is not None else state_path()
	path.parent.mkdir(parents=True, exist_ok=True)
	with open(path, 'w', encoding='utf-8') as f:
		json.dump(snapshot.to_dict(), f)

def load_snapshot(today, path=None):
	"""Return the saved snapshot for today, or None.

	Snapshots from an earlier date are discarded; a new day starts fresh.
	"""
	path = Path(path) if path is not None else state_path()
	if not path.exists():
		return None
	try:
		with open(path, 'r', encoding='utf-8') as f:
			snapshot = SessionSnapshot.from_dict(json.load(f))
	except (OSError, ValueError, KeyError, TypeError) as exc:
		logger.warning("Ignoring unreadable session snapshot %s: %s", path, exc)
		return None
	if snapshot.date != today.isoformat():
		logger.info("Discarding session snapshot from %s", snapshot.date)
		clear_snapshot(path)
		return None
	return snapshot

def clear_snapshot(path=None):
	path = Path(path) if path is not None else state_path()
	if path.exists():
		path.unlink()
