"""
Data loading and validation module.
Handles loading the title/runtime/views table from CSV (or in-memory rows)
and rejecting malformed rows with a recorded error instead of coercing them.
"""

# Standard libs for typing and paths
from typing import Dict, Iterable, List, Mapping  # type hints
from pathlib import Path  # filesystem-safe paths

# pandas reads the viewing-report CSV exports
import pandas as pd  # tabular input

# Import our data classes and parsers used across the project
from .models import LoadResult, RawTitleRecord, RowError  # structured records
from .runtime import parse_views, to_minutes  # field validation
from .errors import InvalidRuntimeFormat, InvalidViewsFormat, MissingColumnsError  # error taxonomy

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Handles loading and validation of the raw title table.
	"""

	# Input column -> RawTitleRecord attribute
	COLUMN_MAP: Dict[str, str] = {
		'Title': 'title',  # display title
		'Runtime': 'runtime',  # H:MM
		'Views': 'views',  # thousands-separated numeral
		'tconst': 'external_id',  # IMDb id used for enrichment
	}

	def __init__(self):
		"""Initialize the loader and expose the required columns."""
		self.required_columns = list(self.COLUMN_MAP)  # store column list for reuse

	def load_records_from_csv(self, filepath: str) -> LoadResult:
		"""
		Load title records from a CSV file with Title, Runtime, Views and tconst columns.
		Returns accepted records plus one RowError per rejected row.
		"""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Title data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading titles from {filepath}...")  # log action

		# Read every column as text so numerals keep their separators until validation
		df = pd.read_csv(filepath, dtype=str, keep_default_na=False, encoding='utf-8')
		self._check_columns(df.columns)  # fail fast on structurally broken input

		result = self.records_from_rows(df.to_dict('records'))  # reuse in-memory path
		logger.info(
			f"[DataLoader] Successfully loaded {len(result.records)} titles ({len(result.errors)} rows rejected)."
		)  # summary
		return result  # return records and errors

	def records_from_rows(self, rows: Iterable[Mapping]) -> LoadResult:
		"""
		Validate an in-memory table (an iterable of column -> value mappings).
		"""
		result = LoadResult()  # accumulator
		for row_num, row in enumerate(rows, 1):  # keep track of row number for diagnostics
			if row_num == 1:
				self._check_columns(row.keys())  # first row tells us the table's columns
			record, error = self._parse_row(row_num, row)  # convert dict -> record
			if error is not None:
				logger.warning(f"[DataLoader] Skipping row {row_num}: {error.message}")  # malformed row
				result.errors.append(error)  # keep a structured trace
				continue  # move on
			result.records.append(record)  # collect
		return result

	def validate_records(self, records: Iterable[RawTitleRecord]) -> LoadResult:
		"""
		Re-check records built elsewhere (not read through this loader).
		Row numbers are 1-based positions in the given sequence.
		"""
		result = LoadResult()
		for row_num, record in enumerate(records, 1):
			row = {col: getattr(record, attr) for col, attr in self.COLUMN_MAP.items()}
			_, error = self._parse_row(row_num, row)
			if error is not None:
				logger.warning(f"[DataLoader] Rejecting record {row_num}: {error.message}")
				result.errors.append(error)
				continue
			result.records.append(record)  # keep the caller's instance
		return result

	def _check_columns(self, columns: Iterable[str]):
		"""Raise MissingColumnsError when a required column is absent."""
		missing = set(self.required_columns) - set(columns)
		if missing:
			raise MissingColumnsError(missing)

	def _parse_row(self, row_num: int, row: Mapping):
		"""
		Convert one raw row into a RawTitleRecord, or return the RowError explaining why not.
		Values are validated here but stored unchanged.
		"""
		values = {attr: self._clean(row.get(col)) for col, attr in self.COLUMN_MAP.items()}

		# A row without a title can never match the vocabulary or be deduplicated
		if not values['title']:
			return None, RowError(row_num, 'Title', '', 'Title is empty')

		try:
			to_minutes(values['runtime'])  # H:MM check
		except InvalidRuntimeFormat as e:
			return None, RowError(row_num, 'Runtime', values['runtime'], str(e))

		try:
			parse_views(values['views'])  # numeral check
		except InvalidViewsFormat as e:
			return None, RowError(row_num, 'Views', values['views'], str(e))

		return RawTitleRecord(**values), None

	def _clean(self, value) -> str:
		"""
		Trim surrounding whitespace; handle None/NaN safely by returning an empty string.
		"""
		if value is None:  # missing cell
			return ''
		if isinstance(value, float) and pd.isna(value):  # NaN from a loose reader
			return ''
		return str(value).strip()  # standardized text

	def get_all_external_ids(self, records: List[RawTitleRecord]) -> List[str]:
		"""Return a sorted list of all unique non-empty external ids."""
		return sorted({r.external_id for r in records if r.external_id})  # sorted for stable display
