"""
Enrichment module.
Deduplicates titles, looks up external metadata in rate-limited batches, scores
sentiment and returns new enriched records together with the corpus score range.
"""

import time  # pause between batches
from concurrent.futures import ThreadPoolExecutor, as_completed  # fixed-window concurrency
from dataclasses import dataclass, field  # result container
from typing import Callable, Dict, List, Optional, Sequence  # type annotations

from loguru import logger  # console logging

from .models import EnrichedTitleRecord, RawTitleRecord, SentenceScore, TitleMetadata
from .errors import EnrichmentLookupFailed
from .runtime import parse_views, to_minutes
from .sentiment import SentimentRange, split_sentences
from .title_parser import TitleParser, normalize_title_key


LookupFn = Callable[[str], Optional[TitleMetadata]]  # external id -> metadata or None
ScoreFn = Callable[[str], float]  # text -> polarity


def _parsed_views(record: RawTitleRecord) -> Optional[int]:
	"""Views of a record whose runtime and views both parse; None otherwise."""
	try:
		to_minutes(record.runtime)
		return parse_views(record.views)
	except ValueError:
		return None


def deduplicate_records(records: Sequence) -> List:
	"""
	Keep one record per normalized title.
	The record with the highest views wins; on equal views the first seen wins.
	The surviving record keeps the position of the first occurrence of its title.
	A record whose runtime or views do not parse never replaces one that does.
	"""
	winners: Dict[str, object] = {}
	for record in records:
		key = normalize_title_key(record.title)
		current = winners.get(key)
		if current is None:
			winners[key] = record
			continue
		views, current_views = _parsed_views(record), _parsed_views(current)
		if views is not None and (current_views is None or views > current_views):
			logger.debug(f"[Enricher] Duplicate title '{key}': keeping higher views row {record.external_id}")
			winners[key] = record
	return list(winners.values())


@dataclass
class EnrichmentResult:
	records: List[EnrichedTitleRecord]
	sentiment_range: SentimentRange = field(default_factory=SentimentRange)
	errors: List[EnrichmentLookupFailed] = field(default_factory=list)


class Enricher:
	"""
	Attaches poster, description, sentiment and production countries to records.
	Lookups run batch_size at a time with pause_seconds between batches;
	any single failed lookup leaves that record with empty metadata.
	"""

	def __init__(
		self,
		lookup: Optional[LookupFn],
		scorer: ScoreFn,
		parser: Optional[TitleParser] = None,
		batch_size: int = 40,
		pause_seconds: float = 1.0,
	):
		if batch_size < 1:
			raise ValueError("batch_size must be at least 1")
		self.lookup = lookup
		self.scorer = scorer
		self.parser = parser or TitleParser()
		self.batch_size = batch_size
		self.pause_seconds = pause_seconds

	def enrich(self, records: Sequence[RawTitleRecord]) -> EnrichmentResult:
		"""Return new enriched records; the input records are left untouched."""
		unique = deduplicate_records(records)
		logger.info(f"[Enricher] {len(records)} rows -> {len(unique)} unique titles")

		errors: List[EnrichmentLookupFailed] = []
		metadata = self._lookup_all([r.external_id for r in unique], errors)

		sentiment_range = SentimentRange()
		enriched = [
			self._merge(record, metadata.get(record.external_id), sentiment_range)
			for record in unique
		]

		found = sum(1 for r in enriched if r.has_metadata)
		logger.info(
			f"[Enricher] Metadata found for {found}/{len(enriched)} titles ({len(errors)} lookups failed)"
		)
		return EnrichmentResult(records=enriched, sentiment_range=sentiment_range, errors=errors)

	def _lookup_all(self, external_ids: Sequence[str], errors: List[EnrichmentLookupFailed]) -> Dict[str, Optional[TitleMetadata]]:
		"""Fetch metadata once per distinct non-empty id, batch by batch."""
		if self.lookup is None:
			logger.info("[Enricher] No metadata collaborator configured; skipping lookups")
			return {}

		ids = list(dict.fromkeys(i for i in external_ids if i))  # distinct, order kept
		results: Dict[str, Optional[TitleMetadata]] = {}
		batches = [ids[i:i + self.batch_size] for i in range(0, len(ids), self.batch_size)]

		for batch_num, batch in enumerate(batches, 1):
			with ThreadPoolExecutor(max_workers=len(batch)) as pool:
				futures = {pool.submit(self.lookup, external_id): external_id for external_id in batch}
				for future in as_completed(futures):
					external_id = futures[future]
					try:
						results[external_id] = future.result()
					except EnrichmentLookupFailed as e:
						logger.warning(f"[Enricher] {e}")
						errors.append(e)
					except Exception as e:
						logger.warning(f"[Enricher] Lookup for {external_id} raised: {e}")
						errors.append(EnrichmentLookupFailed(external_id, str(e)))

			logger.debug(f"[Enricher] Batch {batch_num}/{len(batches)} done ({len(results)} resolved)")
			if batch_num < len(batches) and self.pause_seconds > 0:
				time.sleep(self.pause_seconds)  # external rate limit

		return results

	def _merge(
		self,
		record: RawTitleRecord,
		metadata: Optional[TitleMetadata],
		sentiment_range: SentimentRange,
	) -> EnrichedTitleRecord:
		if metadata is None:
			return EnrichedTitleRecord.from_raw(record)

		sentences = tuple(
			SentenceScore(text=s, score=self.scorer(s))
			for s in split_sentences(metadata.description)
		)
		title_sentiment = self.scorer(self.parser.english_title(record.title))
		if sentences:
			description_sentiment = sum(s.score for s in sentences) / len(sentences)
		else:
			description_sentiment = 0.0

		sentiment_range.observe_all(s.score for s in sentences)
		sentiment_range.observe(title_sentiment)

		return EnrichedTitleRecord(
			title=record.title,
			runtime=record.runtime,
			views=record.views,
			external_id=record.external_id,
			poster_path=metadata.poster_path,
			description=metadata.description,
			description_sentences=sentences,
			title_sentiment=title_sentiment,
			description_sentiment=description_sentiment,
			sentiment=(title_sentiment + description_sentiment) / 2,
			production_countries=metadata.production_countries,
		)
