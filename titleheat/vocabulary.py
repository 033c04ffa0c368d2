"""
Fixed vocabulary of the heatmap.
The rows (canonical title words), the columns (runtime buckets) and the word
categories are constants of the system; they are never computed at run time.
scripts/derive_top_words.py re-derives TOP_WORDS from a title table offline.
"""

from typing import List, Optional, Sequence

from .models import CategoryDefinition


# Heatmap rows, in display order (canonical singular forms)
TOP_WORDS: List[str] = [
	'love', 'christmas', 'life', 'story', 'man', 'woman', 'girl', 'boy',
	'kid', 'baby', 'family', 'king', 'queen', 'prince', 'princess', 'world',
	'house', 'home', 'city', 'island', 'school', 'night', 'day', 'time',
	'summer', 'last', 'dead', 'killer', 'murder', 'blood', 'monster', 'ghost',
	'devil', 'angel', 'god', 'dark', 'black', 'wild', 'lost', 'secret',
	'game', 'war', 'heart', 'wedding', 'dream', 'star', 'dog', 'big',
	'little', 'good', 'bad', 'great', 'new', 'american', 'true',
]

# Heatmap columns: runtime buckets in minutes
RUNTIME_BUCKETS: List[int] = list(range(20, 200, 10))

# Categories may overlap; a word can belong to zero, one or several of them
WORD_CATEGORIES: List[CategoryDefinition] = [
	CategoryDefinition('People', ('man', 'woman', 'girl', 'boy', 'kid', 'baby', 'family')),
	CategoryDefinition('Royalty', ('king', 'queen', 'prince', 'princess')),
	CategoryDefinition('Romance', ('love', 'heart', 'wedding', 'dream')),
	CategoryDefinition('Holidays', ('christmas', 'summer')),
	CategoryDefinition('Places', ('world', 'house', 'home', 'city', 'island', 'school')),
	CategoryDefinition('Time', ('night', 'day', 'time', 'summer', 'last')),
	CategoryDefinition('Crime', ('dead', 'killer', 'murder', 'blood')),
	CategoryDefinition('Supernatural', ('monster', 'ghost', 'devil', 'angel', 'god', 'dark')),
	CategoryDefinition('Descriptors', ('black', 'wild', 'big', 'little', 'good', 'bad', 'great', 'new', 'true')),
]


def get_categories_for_word(
	word: str,
	categories: Sequence[CategoryDefinition] = WORD_CATEGORIES,
) -> List[CategoryDefinition]:
	"""Return every category whose word set contains the given canonical word."""
	return [c for c in categories if word in c.words]


def find_category(
	name: str,
	categories: Sequence[CategoryDefinition] = WORD_CATEGORIES,
) -> Optional[CategoryDefinition]:
	"""Look a category up by name (case-insensitive)."""
	wanted = name.strip().lower()
	for category in categories:
		if category.name.lower() == wanted:
			return category
	return None
