"""
Sentiment scoring module.
Scores titles and description sentences with VADER and tracks the corpus-wide
score range used to display sentiment as a percentage.
"""

import re  # sentence boundary detection
from dataclasses import dataclass  # explicit range accumulator
from typing import Iterable, List, Optional  # type annotations

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer  # lexicon-based polarity

from loguru import logger  # console logging


RE_SENTENCE_END = re.compile(r"(?<=[.!?])")  # split after terminal punctuation


def split_sentences(text: str) -> List[str]:
	"""Split text into sentence-like segments on '.', '!' and '?', dropping empty ones."""
	if not text:
		return []
	segments = [s.strip() for s in RE_SENTENCE_END.split(text)]
	# A segment made only of punctuation carries no words to score
	return [s for s in segments if s and re.search(r"\w", s)]


class SentimentScorer:
	"""
	Thin wrapper around VADER returning the compound polarity in [-1, 1].
	Any callable taking a string and returning a float can be used in its place.
	"""

	def __init__(self):
		self.analyzer = SentimentIntensityAnalyzer()  # loads the bundled lexicon once
		logger.debug("[Sentiment] VADER analyzer ready")

	def score(self, text: str) -> float:
		if not text or not text.strip():
			return 0.0
		return float(self.analyzer.polarity_scores(text)['compound'])

	def __call__(self, text: str) -> float:
		return self.score(text)


@dataclass
class SentimentRange:
	"""
	Running min/max of every score observed across the corpus.
	Returned alongside enriched records instead of living in module state.
	"""
	min_score: Optional[float] = None
	max_score: Optional[float] = None

	def observe(self, score: float):
		if self.min_score is None or score < self.min_score:
			self.min_score = score
		if self.max_score is None or score > self.max_score:
			self.max_score = score

	def observe_all(self, scores: Iterable[float]):
		for score in scores:
			self.observe(score)

	@property
	def is_empty(self) -> bool:
		return self.min_score is None


def to_percentage(score: Optional[float], sentiment_range: SentimentRange) -> int:
	"""
	Map a score onto [-100, 100] relative to the corpus range.
	Positive scores are scaled by the corpus max, negative ones by |corpus min|.
	"""
	if score is None or score == 0 or sentiment_range.is_empty:
		return 0
	if score > 0:
		bound = sentiment_range.max_score
		value = score / bound if bound and bound > 0 else 0.0
	else:
		bound = sentiment_range.min_score
		value = -(abs(score) / abs(bound)) if bound and bound < 0 else 0.0
	value = max(-1.0, min(1.0, value))
	return int(round(value * 100))


def average_sentiment(movies) -> Optional[float]:
	"""Mean overall sentiment of the movies that have one; None when none do."""
	scores = [m.sentiment for m in movies if m.sentiment is not None]
	if not scores:
		return None
	return sum(scores) / len(scores)
