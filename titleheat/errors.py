"""
Error types raised by the heatmap pipeline.
Row-level and lookup-level errors are recovered by the caller; only
MissingColumnsError is meant to reach the user as a hard failure.
"""


class HeatmapError(Exception):
	"""Base class for all pipeline errors."""


class InvalidRuntimeFormat(HeatmapError, ValueError):
	"""A runtime string could not be parsed into hours and minutes."""

	def __init__(self, value):
		self.value = value
		super().__init__(f"Invalid runtime format: {value!r} (expected H:MM)")


class InvalidViewsFormat(HeatmapError, ValueError):
	"""A views string is not a non-negative thousands-separated integer."""

	def __init__(self, value):
		self.value = value
		super().__init__(f"Invalid views value: {value!r}")


class EnrichmentLookupFailed(HeatmapError):
	"""The metadata lookup for one external id failed."""

	def __init__(self, external_id: str, reason: str = ''):
		self.external_id = external_id
		self.reason = reason
		message = f"Metadata lookup failed for {external_id}"
		if reason:
			message = f"{message}: {reason}"
		super().__init__(message)


class MissingColumnsError(HeatmapError, ValueError):
	"""The input table is missing one or more required columns."""

	def __init__(self, missing):
		self.missing = sorted(missing)
		super().__init__(f"Input table is missing required columns: {self.missing}")
