"""
Data models for the Title Heatmap.
Defines the core data structures that flow from the raw table to the heatmap cells.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import FrozenSet, List, Optional, Tuple  # immutable sets, lists, optional values, tuples


@dataclass(frozen=True)
class RawTitleRecord:
	"""
	One row of the input table, exactly as it was read.
	Values stay as strings; parsing happens in the runtime module.
	"""
	title: str  # display title, may carry "//"-joined alternate-language titles
	runtime: str  # "H:MM" or "HH:MM"
	views: str  # thousands-separated numeral, e.g. "1,200,000"
	external_id: str  # stable cross-reference key (IMDb tconst)


@dataclass(frozen=True)
class TitleMetadata:
	"""Result of one external metadata lookup."""
	poster_path: str = ''  # relative poster path, empty when unknown
	description: str = ''  # free-text overview
	production_countries: FrozenSet[str] = frozenset()  # ISO country codes


@dataclass(frozen=True)
class SentenceScore:
	text: str  # one sentence-like segment of the description
	score: float  # sentiment polarity of the segment


@dataclass(frozen=True)
class EnrichedTitleRecord:
	"""
	A raw record plus the metadata attached after lookup.
	Sentiment fields are None when no metadata was found for the title.
	"""
	title: str
	runtime: str
	views: str
	external_id: str
	poster_path: str = ''
	description: str = ''
	description_sentences: Tuple[SentenceScore, ...] = ()
	title_sentiment: Optional[float] = None
	description_sentiment: Optional[float] = None
	sentiment: Optional[float] = None  # mean of title and description sentiment
	production_countries: FrozenSet[str] = frozenset()

	@classmethod
	def from_raw(cls, record: RawTitleRecord) -> 'EnrichedTitleRecord':
		"""Wrap a raw record with empty metadata."""
		return cls(
			title=record.title,
			runtime=record.runtime,
			views=record.views,
			external_id=record.external_id,
		)

	@property
	def has_metadata(self) -> bool:
		return self.sentiment is not None


@dataclass(frozen=True)
class MovieDetail:
	"""
	Per-movie detail kept inside a heatmap cell.
	These fields are everything the display layer shows for a title.
	"""
	title: str  # original title text
	views: int  # parsed view count
	runtime: int  # runtime in minutes (not bucketed)
	id: str  # external id
	word: str  # canonical word that placed the movie in this cell
	poster_path: str = ''
	description: str = ''
	description_sentences: Tuple[SentenceScore, ...] = ()
	sentiment: Optional[float] = None
	title_sentiment: Optional[float] = None
	description_sentiment: Optional[float] = None
	production_countries: FrozenSet[str] = frozenset()
	categories: Tuple[str, ...] = ()  # names of the categories the word belongs to


@dataclass(frozen=True)
class WordBucketCell:
	"""The aggregate of all movies sharing one (runtime bucket, canonical word) pair."""
	bucket: int  # runtime bucket in minutes (multiple of 10)
	word: str  # canonical vocabulary word
	average_views: int  # half-up rounded mean of views across deduplicated movies
	movies: Tuple[MovieDetail, ...]  # deduplicated by normalized title


@dataclass(frozen=True)
class CategoryDefinition:
	name: str  # label shown next to the bracket
	words: Tuple[str, ...]  # canonical vocabulary words the category covers


@dataclass(frozen=True)
class CategoryAggregate:
	"""
	Result of re-grouping the cells by category instead of by word.
	Movies are deduplicated and sorted (pinned first, then by views).
	"""
	category: CategoryDefinition
	movies: Tuple[MovieDetail, ...]
	average_views: int
	cells: Tuple[WordBucketCell, ...]  # contributing cells
	poster_ids: Tuple[str, ...] = ()  # first movie with a poster in each cell


@dataclass(frozen=True)
class RowError:
	"""A row rejected while parsing the input table."""
	row: int  # 1-based position in the table being processed
	field: str  # column that failed to parse
	value: str  # offending raw value
	message: str  # human-readable reason


@dataclass(frozen=True)
class HighlightTarget:
	"""
	Which canonical words to emphasize in a title.
	Built with none(), single() or many() so callers never pass mixed shapes.
	"""
	words: Tuple[str, ...] = ()

	@classmethod
	def none(cls) -> 'HighlightTarget':
		return cls(())

	@classmethod
	def single(cls, word: str) -> 'HighlightTarget':
		return cls((word,))

	@classmethod
	def many(cls, words) -> 'HighlightTarget':
		if isinstance(words, str):
			raise TypeError("many() takes an iterable of words; use single() for one word")
		return cls(tuple(words))


@dataclass
class LoadResult:
	"""Records accepted from an input table, plus the rows that were rejected."""
	records: List[RawTitleRecord] = field(default_factory=list)
	errors: List[RowError] = field(default_factory=list)
