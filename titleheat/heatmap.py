"""
Heatmap engine module.
Runs the one-way pipeline (filter -> enrich -> aggregate) and serves the
read-only queries the display layer depends on.
"""

from typing import Dict, List, Optional, Sequence, Tuple  # type annotations

# Import project modules for data structures and components
from .models import CategoryAggregate, CategoryDefinition, MovieDetail, RawTitleRecord, RowError, WordBucketCell
from .title_parser import TitleParser  # vocabulary matching
from .enrichment import Enricher, LookupFn, ScoreFn  # metadata + sentiment
from .aggregator import Aggregator, view_bounds  # cell building
from .category import aggregate_by_category  # category view
from .range_filter import default_tolerance, filter_by_value_range, matching_words  # legend view
from .sentiment import SentimentRange, SentimentScorer  # score range
from .vocabulary import RUNTIME_BUCKETS, TOP_WORDS, WORD_CATEGORIES, find_category  # fixed grid
from .data_loader import DataLoader  # CSV input
from .config import Settings  # environment settings
from .tmdb_client import TMDBClient  # default metadata collaborator
from .errors import EnrichmentLookupFailed  # lookup error records

# Import loguru for console logging
from loguru import logger  # simple structured logger


class HeatmapEngine:
	"""
	High-level API combining title filtering, enrichment and aggregation.
	The cell collection is built once per load and never mutated afterwards.
	"""
	def __init__(
		self,
		records: Sequence[RawTitleRecord],  # input rows, re-validated here
		lookup: Optional[LookupFn] = None,  # external metadata collaborator
		scorer: Optional[ScoreFn] = None,  # sentiment function (VADER by default)
		vocabulary: Sequence[str] = TOP_WORDS,  # heatmap rows
		runtime_buckets: Sequence[int] = RUNTIME_BUCKETS,  # heatmap columns
		categories: Sequence[CategoryDefinition] = WORD_CATEGORIES,  # category brackets
		batch_size: int = 40,  # lookups per batch
		pause_seconds: float = 1.0,  # pause between batches
		load_errors: Sequence[RowError] = (),  # rows rejected before we got them
	):
		self.parser = TitleParser(vocabulary)  # shared tokenizer
		self.runtime_buckets = list(runtime_buckets)
		self.categories = list(categories)
		self.errors: List[RowError] = list(load_errors)  # row-level errors
		self.lookup_errors: List[EnrichmentLookupFailed] = []  # lookup-level errors

		# Step 1: reject rows whose runtime or views do not parse, so they never win deduplication
		checked = DataLoader().validate_records(records)
		self.errors.extend(checked.errors)

		# Step 2: keep only titles that can reach the heatmap (before enrichment, to save lookups)
		candidates = [r for r in checked.records if self.parser.matches_vocabulary(r.title)]
		logger.info(f"[Engine] {len(candidates)}/{len(records)} titles contain vocabulary words")

		# Step 3: deduplicate and enrich
		enricher = Enricher(
			lookup=lookup,
			scorer=scorer or SentimentScorer(),
			parser=self.parser,
			batch_size=batch_size,
			pause_seconds=pause_seconds,
		)
		enrichment = enricher.enrich(candidates)
		self.records = enrichment.records
		self.sentiment_range: SentimentRange = enrichment.sentiment_range
		self.lookup_errors.extend(enrichment.errors)
		self.total_movie_count = len(self.records)  # unique titles in consideration

		# Step 4: aggregate into cells
		self.aggregator = Aggregator(self.parser, self.categories)
		self.cells: Tuple[WordBucketCell, ...] = tuple(self.aggregator.aggregate(self.records, self.errors))
		self._cell_index: Dict[Tuple[int, str], WordBucketCell] = {(c.bucket, c.word): c for c in self.cells}
		self.view_bounds = view_bounds(self.cells)
		logger.info(
			f"[Engine] Ready | cells={len(self.cells)} | movies={self.total_movie_count} | views={self.view_bounds} | sentiment=({self.sentiment_range.min_score}, {self.sentiment_range.max_score})"
		)

	@classmethod
	def from_csv(cls, path: Optional[str] = None, settings: Optional[Settings] = None, **kwargs) -> 'HeatmapEngine':
		"""Load a CSV and build an engine, using TMDB when a token is configured."""
		settings = settings or Settings.from_env()
		loaded = DataLoader().load_records_from_csv(path or settings.data_path)
		lookup = None
		if settings.enrichment_enabled:
			client = TMDBClient(
				settings.tmdb_api_token,
				timeout=settings.tmdb_timeout,
				cache_size=settings.tmdb_cache_size,
			)
			lookup = client.lookup
		else:
			logger.warning("[Engine] TMDB_API_TOKEN not set; titles will have no posters or sentiment")
		kwargs.setdefault('batch_size', settings.tmdb_batch_size)
		kwargs.setdefault('pause_seconds', settings.tmdb_batch_pause)
		return cls(loaded.records, lookup=lookup, load_errors=loaded.errors, **kwargs)

	@property
	def vocabulary(self) -> List[str]:
		return self.parser.vocabulary

	def cell(self, bucket: int, word: str) -> Optional[WordBucketCell]:
		return self._cell_index.get((bucket, word))

	def grid(self) -> List[List[Optional[int]]]:
		"""Average views for the full fixed grid (rows = words, columns = buckets); None where empty."""
		return [
			[self._cell_value(bucket, word) for bucket in self.runtime_buckets]
			for word in self.vocabulary
		]

	def _cell_value(self, bucket: int, word: str) -> Optional[int]:
		cell = self._cell_index.get((bucket, word))
		return cell.average_views if cell else None

	def category(self, name: str, priority_ids: Sequence[str] = ()) -> Optional[CategoryAggregate]:
		"""Aggregate by category name; None for an unknown category."""
		definition = find_category(name, self.categories)
		if definition is None:
			return None
		return aggregate_by_category(self.cells, definition, priority_ids)

	def legend(self, value: float, tolerance: Optional[float] = None) -> List[MovieDetail]:
		return filter_by_value_range(self.cells, value, tolerance)

	def legend_words(self, value: float, tolerance: Optional[float] = None) -> List[str]:
		return matching_words(self.cells, value, tolerance)

	def default_tolerance(self) -> float:
		return default_tolerance(self.cells)
