"""
Title parsing module.
Tokenizes titles, maps inflected words to their canonical dictionary form,
filters them against the fixed vocabulary, and highlights matches for display.
"""

import html  # escape titles before inserting markup
import re  # token cleanup and word-boundary highlighting
from typing import Dict, Iterable, List, Optional, Set, Tuple  # type annotations

from loguru import logger  # console logging

from .models import HighlightTarget  # uniform highlight request
from .vocabulary import TOP_WORDS  # default heatmap rows


def normalize_title_key(title: str) -> str:
	"""Key used for every title deduplication: trimmed and lowercased."""
	return (title or '').strip().lower()


class TitleParser:
	"""
	Extracts canonical vocabulary words from titles.
	Titles longer than MAX_TITLE_WORDS words are excluded from the heatmap entirely.
	"""

	MAX_TITLE_WORDS = 5  # scope limit for the whole system
	LANGUAGE_SEPARATOR = '//'  # "English Title // Titre Français"

	# Irregular plurals checked before the regular "-s" rule
	IRREGULAR_PLURALS: Dict[str, str] = {
		'men': 'man',
		'women': 'woman',
		'lives': 'life',
	}
	# Words that end in "s" but are not plurals
	PLURAL_STOPLIST: Set[str] = {'christmas', 'its', 'lasts', 'miss'}

	RE_NON_ALPHA = re.compile(r"[^a-zA-Z]")  # everything that is not an ASCII letter

	def __init__(self, vocabulary: Optional[Iterable[str]] = None):
		# Keep the display order of the rows and a set for fast membership tests
		self.vocabulary: List[str] = list(vocabulary if vocabulary is not None else TOP_WORDS)
		self._vocabulary_set = set(self.vocabulary)
		self._singular_to_plural = {v: k for k, v in self.IRREGULAR_PLURALS.items()}
		logger.debug(f"[TitleParser] Initialized with {len(self.vocabulary)} vocabulary words")

	def normalize(self, word: str) -> str:
		"""Map an inflected lowercase word to its canonical form (first matching rule wins)."""
		if word in self.IRREGULAR_PLURALS:
			return self.IRREGULAR_PLURALS[word]
		if word.endswith('s') and len(word) > 2 and word not in self.PLURAL_STOPLIST:
			return word[:-1]
		return word

	def unnormalize(self, word: str) -> str:
		"""Best-effort plural of a canonical word, used only to find it inside a title."""
		if word in self._singular_to_plural:
			return self._singular_to_plural[word]
		return word + 's'

	def english_title(self, title: str) -> str:
		"""Return the part of the title before the first '//' separator."""
		return (title or '').split(self.LANGUAGE_SEPARATOR)[0].strip()

	def extract_words(self, title: str) -> List[str]:
		"""Split the English title on spaces into lowercase alphabetic tokens."""
		english = (title or '').split(self.LANGUAGE_SEPARATOR)[0]
		tokens = [self.RE_NON_ALPHA.sub('', token.lower()) for token in english.split(' ')]
		return [t for t in tokens if t]

	def extract_vocabulary_words(self, title: str) -> Tuple[str, ...]:
		"""
		Return the unique canonical vocabulary words found in the title.
		Order follows first occurrence; empty for titles with 0 or more than 5 words.
		"""
		words = self.extract_words(title)
		if not words or len(words) > self.MAX_TITLE_WORDS:
			return ()

		found: List[str] = []
		for word in words:
			canonical = self.normalize(word)
			if canonical in self._vocabulary_set and canonical not in found:
				found.append(canonical)
		return tuple(found)

	def matches_vocabulary(self, title: str) -> bool:
		return bool(self.extract_vocabulary_words(title))

	def highlight(self, title: str, target: HighlightTarget, tag: str = 'strong') -> str:
		"""
		Wrap each targeted word in the title with an HTML tag.
		The canonical form is tried first; the plural form only when the canonical one is absent.
		"""
		display = html.escape(self.english_title(title), quote=False)
		for word in target.words:
			for candidate in (word, self.unnormalize(word)):
				pattern = re.compile(rf"\b({re.escape(candidate)})\b", re.IGNORECASE)
				if pattern.search(display):
					display = pattern.sub(rf"<{tag}>\1</{tag}>", display)
					break
		return display
