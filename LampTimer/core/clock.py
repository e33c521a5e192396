import datetime
from datetime import timezone

def utc_now_iso():
	"""Return current UTC time as ISO8601 string (no microseconds)."""
	return datetime.datetime.now(timezone.utc).replace(microsecond=0).isoformat()

def local_today():
	"""Return local calendar date."""
	return datetime.date.today()

def local_today_str():
	"""Return local date as YYYY-MM-DD string."""
	return local_today().isoformat()

def fmt_mmss(seconds: int) -> str:
	"""Format seconds as MM:SS (minutes are not wrapped into hours)."""
	seconds = max(0, int(seconds))
	m = seconds // 60
	s = seconds % 60
	return f"{m:02}:{s:02}"
