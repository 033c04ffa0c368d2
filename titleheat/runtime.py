"""
Runtime bucketing and numeric field parsing.
Converts "H:MM" runtime strings into minutes and 10-minute buckets, and the
thousands-separated views column into integers.
"""

import re  # strict patterns for the two numeric columns

from .errors import InvalidRuntimeFormat, InvalidViewsFormat


RE_RUNTIME = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")  # 1:30, 01:30, 12:05
RE_VIEWS = re.compile(r"^\s*\d{1,3}(,\d{3})*\s*$|^\s*\d+\s*$")  # 1,200,000 or 1200000

BUCKET_SIZE = 10  # minutes per heatmap column


def to_minutes(runtime: str) -> int:
	"""
	Convert an "H:MM" / "HH:MM" runtime into total minutes.
	Raises InvalidRuntimeFormat instead of returning a NaN-like value.
	"""
	if not isinstance(runtime, str):
		raise InvalidRuntimeFormat(runtime)
	m = RE_RUNTIME.match(runtime)
	if not m:
		raise InvalidRuntimeFormat(runtime)
	hours, minutes = int(m.group(1)), int(m.group(2))
	if minutes >= 60:
		raise InvalidRuntimeFormat(runtime)
	return hours * 60 + minutes


def to_bucket(minutes: int) -> int:
	"""Round minutes to the nearest multiple of 10 (halves round up)."""
	if minutes < 0:
		raise ValueError(f"Runtime cannot be negative: {minutes}")
	return (minutes + BUCKET_SIZE // 2) // BUCKET_SIZE * BUCKET_SIZE


def runtime_bucket(runtime: str) -> int:
	return to_bucket(to_minutes(runtime))


def parse_views(views) -> int:
	"""Parse a views value such as "1,234,567" into an int."""
	if isinstance(views, bool):
		raise InvalidViewsFormat(views)
	if isinstance(views, int):
		if views < 0:
			raise InvalidViewsFormat(views)
		return views
	if not isinstance(views, str) or not RE_VIEWS.match(views):
		raise InvalidViewsFormat(views)
	return int(views.strip().replace(',', ''))
