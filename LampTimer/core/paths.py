import os
from pathlib import Path

def user_data_dir(app_name="LampTimer"):
	"""Return per-user data dir (Windows/macOS/Linux), honouring LAMP_DATA_DIR."""
	override = os.environ.get("LAMP_DATA_DIR")
	if override:
		path = Path(override).expanduser()
	else:
		if os.name == "nt":
			base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
		elif os.name == "posix":
			base = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
		else:
			base = os.path.expanduser("~")
		path = Path(base) / app_name
	path.mkdir(parents=True, exist_ok=True)
	return path

def db_path():
	"""Return Path to history.db inside user data dir."""
	return user_data_dir() / "history.db"

def state_path():
	"""Return Path to the saved session snapshot."""
	return user_data_dir() / "session_state.json"

def catalog_path():
	"""Return Path to a custom stage catalog, or None when not configured."""
	configured = os.environ.get("LAMP_CATALOG_PATH")
	if configured:
		return Path(configured).expanduser()
	candidate = user_data_dir() / "stages.json"
	return candidate if candidate.exists() else None
