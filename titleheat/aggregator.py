"""
Aggregation module.
Groups enriched records by (runtime bucket, canonical word), deduplicates movies
by title within each group and computes the average views per heatmap cell.
"""

from collections import defaultdict  # grouping buckets
from typing import Dict, Iterable, List, Optional, Sequence, Tuple  # type annotations

from loguru import logger  # console logging

from .models import CategoryDefinition, EnrichedTitleRecord, MovieDetail, RowError, WordBucketCell
from .errors import InvalidRuntimeFormat, InvalidViewsFormat
from .runtime import parse_views, to_bucket, to_minutes
from .title_parser import TitleParser, normalize_title_key
from .vocabulary import WORD_CATEGORIES, get_categories_for_word


def round_half_up_mean(values: Sequence[int]) -> int:
	"""Integer mean of non-negative ints, halves rounded up, computed exactly."""
	if not values:
		raise ValueError("Cannot average an empty group")
	total, count = sum(values), len(values)
	return (2 * total + count) // (2 * count)


def deduplicate_movies(movies: Iterable[MovieDetail]) -> List[MovieDetail]:
	"""
	One movie per normalized title: highest views wins, first seen wins ties.
	Output keeps the position of each title's first occurrence.
	"""
	winners: Dict[str, MovieDetail] = {}
	for movie in movies:
		key = normalize_title_key(movie.title)
		current = winners.get(key)
		if current is None or movie.views > current.views:
			winners[key] = movie
	return list(winners.values())


def view_bounds(cells: Sequence[WordBucketCell]) -> Tuple[int, int]:
	"""(min, max) of cell averages; (0, 0) for an empty heatmap."""
	if not cells:
		return 0, 0
	values = [c.average_views for c in cells]
	return min(values), max(values)


class Aggregator:
	"""
	Builds the heatmap cell dataset from enriched records.
	Only (bucket, word) pairs with at least one movie produce a cell.
	"""

	def __init__(
		self,
		parser: Optional[TitleParser] = None,
		categories: Sequence[CategoryDefinition] = WORD_CATEGORIES,
	):
		self.parser = parser or TitleParser()
		self.categories = list(categories)
		# Row order of the heatmap, used to sort the output
		self._word_order = {w: i for i, w in enumerate(self.parser.vocabulary)}

	def aggregate(
		self,
		records: Sequence[EnrichedTitleRecord],
		errors: Optional[List[RowError]] = None,
	) -> List[WordBucketCell]:
		"""
		Group records into cells. Rows with unparseable runtime or views are skipped
		and, when an errors list is given, recorded in it.
		"""
		groups: Dict[Tuple[int, str], List[MovieDetail]] = defaultdict(list)
		skipped_no_word = 0

		for row_num, record in enumerate(records, 1):
			words = self.parser.extract_vocabulary_words(record.title)
			if not words:
				skipped_no_word += 1
				continue

			try:
				minutes = to_minutes(record.runtime)
				views = parse_views(record.views)
			except (InvalidRuntimeFormat, InvalidViewsFormat) as e:
				logger.warning(f"[Aggregator] Skipping '{record.title}': {e}")
				if errors is not None:
					field = 'Runtime' if isinstance(e, InvalidRuntimeFormat) else 'Views'
					errors.append(RowError(row_num, field, str(e.value), str(e)))
				continue

			bucket = to_bucket(minutes)
			for word in words:  # one contribution per matched word
				groups[(bucket, word)].append(self._movie_detail(record, word, minutes, views))

		cells = []
		for (bucket, word), movies in groups.items():
			unique = deduplicate_movies(movies)
			cells.append(WordBucketCell(
				bucket=bucket,
				word=word,
				average_views=round_half_up_mean([m.views for m in unique]),
				movies=tuple(unique),
			))

		cells.sort(key=lambda c: (c.bucket, self._word_order.get(c.word, len(self._word_order))))
		logger.info(
			f"[Aggregator] Built {len(cells)} cells from {len(records)} records ({skipped_no_word} without vocabulary words)"
		)
		return cells

	def _movie_detail(self, record: EnrichedTitleRecord, word: str, minutes: int, views: int) -> MovieDetail:
		categories = tuple(c.name for c in get_categories_for_word(word, self.categories))
		return MovieDetail(
			title=record.title,
			views=views,
			runtime=minutes,
			id=record.external_id,
			word=word,
			poster_path=record.poster_path,
			description=record.description,
			description_sentences=record.description_sentences,
			sentiment=record.sentiment,
			title_sentiment=record.title_sentiment,
			description_sentiment=record.description_sentiment,
			production_countries=record.production_countries,
			categories=categories,
		)
