"""
Legend range filter.
Selects the cells whose average views lie near a value on the color legend
and returns their movies, closest first.
"""

from typing import List, Optional, Sequence

from .models import MovieDetail, WordBucketCell
from .aggregator import deduplicate_movies, view_bounds


DEFAULT_TOLERANCE_FRACTION = 0.05  # share of the full average-views range


def default_tolerance(cells: Sequence[WordBucketCell], fraction: float = DEFAULT_TOLERANCE_FRACTION) -> float:
	low, high = view_bounds(cells)
	return (high - low) * fraction


def matching_cells(
	cells: Sequence[WordBucketCell],
	query_value: float,
	tolerance: Optional[float] = None,
) -> List[WordBucketCell]:
	"""Cells whose average is within tolerance of the query value (inclusive)."""
	if tolerance is None:
		tolerance = default_tolerance(cells)
	return [c for c in cells if abs(c.average_views - query_value) <= tolerance]


def matching_words(
	cells: Sequence[WordBucketCell],
	query_value: float,
	tolerance: Optional[float] = None,
) -> List[str]:
	"""Distinct words of the qualifying cells, in cell order."""
	return list(dict.fromkeys(c.word for c in matching_cells(cells, query_value, tolerance)))


def filter_by_value_range(
	cells: Sequence[WordBucketCell],
	query_value: float,
	tolerance: Optional[float] = None,
) -> List[MovieDetail]:
	"""
	All movies of the qualifying cells, deduplicated by title and sorted by
	distance of their own views from the query value, then by views descending.
	"""
	candidates = deduplicate_movies(
		m for cell in matching_cells(cells, query_value, tolerance) for m in cell.movies
	)
	return sorted(candidates, key=lambda m: (abs(m.views - query_value), -m.views))
