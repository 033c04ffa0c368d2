"""
Word counting module.
Re-derives the heatmap vocabulary from a title table: counts the words of short
titles and keeps the most frequent ones. Used offline only; the running
system always reads TOP_WORDS.
"""

from collections import Counter  # token frequencies
from typing import FrozenSet, List, Optional, Sequence  # type annotations

from loguru import logger  # console logging

from .models import RawTitleRecord
from .runtime import parse_views
from .title_parser import TitleParser


# Articles, prepositions, language tags and a few plurals that would crowd the top list
WORD_STOPLIST: FrozenSet[str] = frozenset({
	'the', 'and', 'of', 'or', 'la', 'el', 'a', 'in', 'to', 'for', 'with', 'de',
	'tamil', 'on', 'ii', 'at', 'hindi', 'is', 'after', 'from', 'telugu', 'up',
	'girls', 'boys', 'days', 'men',
})

TOP_WORD_COUNT = 55  # rows of the heatmap


def count_title_words(
	records: Sequence[RawTitleRecord],
	parser: Optional[TitleParser] = None,
	stoplist: FrozenSet[str] = WORD_STOPLIST,
) -> Counter:
	"""
	Count the tokens of every title with at most MAX_TITLE_WORDS English words.
	Rows are visited highest views first so equal counts keep that order.
	"""
	parser = parser or TitleParser()
	by_views = sorted(records, key=lambda r: parse_views(r.views), reverse=True)  # stable for ties

	counts: Counter = Counter()
	skipped = 0
	for record in by_views:
		words = parser.extract_words(record.title)
		if not words or len(words) > parser.MAX_TITLE_WORDS:
			skipped += 1
			continue
		counts.update(w for w in words if w not in stoplist)

	logger.debug(f"[WordCounts] Counted {len(counts)} distinct words ({skipped} titles skipped)")
	return counts


def derive_top_words(
	records: Sequence[RawTitleRecord],
	parser: Optional[TitleParser] = None,
	limit: int = TOP_WORD_COUNT,
) -> List[str]:
	"""Most frequent title words, ties in first-seen order."""
	counts = count_title_words(records, parser)
	return [word for word, _ in counts.most_common(limit)]
