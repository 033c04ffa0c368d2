"""
Unit tests for TitleParser: plural normalization, vocabulary extraction and highlighting.
Run: pytest tests/test_title_parser.py
"""

import pytest

from titleheat.models import HighlightTarget
from titleheat.title_parser import TitleParser, normalize_title_key


@pytest.fixture
def parser():
	return TitleParser(['man', 'woman', 'life', 'good', 'boy', 'christmas', 'girl', 'love'])


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def test_irregular_plurals(parser):
	assert_equal(parser.normalize('men'), 'man', "men -> man")
	assert_equal(parser.normalize('women'), 'woman', "women -> woman")
	assert_equal(parser.normalize('lives'), 'life', "lives -> life (irregular wins over -s rule)")


def test_regular_plurals_and_stoplist(parser):
	assert_equal(parser.normalize('girls'), 'girl', "regular plural")
	assert_equal(parser.normalize('us'), 'us', "two-letter words are kept")
	for word in ('christmas', 'its', 'lasts', 'miss'):
		assert_equal(parser.normalize(word), word, f"stoplist word {word}")
	assert_equal(parser.normalize('love'), 'love', "singular unchanged")


def test_unnormalize_round_trip(parser):
	for canonical in ('man', 'woman', 'life', 'girl', 'boy', 'love'):
		assert_equal(parser.normalize(parser.unnormalize(canonical)), canonical, f"round trip {canonical}")
	assert_equal(parser.unnormalize('man'), 'men', "irregular inverse")
	assert_equal(parser.unnormalize('girl'), 'girls', "regular inverse")


def test_extract_words_cleans_tokens(parser):
	words = parser.extract_words("Spider-Man: Into the Spider-Verse")
	assert_equal(words, ['spiderman', 'into', 'the', 'spiderverse'], "punctuation stripped")
	assert_equal(parser.extract_words("  "), [], "blank title")


def test_only_english_variant_is_used(parser):
	assert_equal(parser.extract_vocabulary_words("Good Boy // Buen Chico Good Girl"), ('good', 'boy'), "text after // ignored")
	assert_equal(parser.english_title("Love // Amor"), 'Love', "english title")


def test_vocabulary_words_are_unique(parser):
	assert_equal(parser.extract_vocabulary_words("Boy Meets Boy"), ('boy',), "repeated word counted once")
	assert_equal(parser.extract_vocabulary_words("Good Men, Good Women"), ('good', 'man', 'woman'), "plurals collapse")


def test_title_length_cap(parser):
	assert_equal(parser.extract_vocabulary_words("One Two Three Four Good"), ('good',), "five words allowed")
	assert_equal(parser.extract_vocabulary_words("The Good Man Who Was Lost"), (), "six words excluded")
	assert not parser.matches_vocabulary("Nothing To See Here")


def test_highlight_prefers_canonical_form(parser):
	html = parser.highlight("The Good Man", HighlightTarget.single('man'))
	assert_equal(html, "The Good <strong>Man</strong>", "canonical form highlighted")


def test_highlight_falls_back_to_plural(parser):
	html = parser.highlight("Little Women", HighlightTarget.single('woman'))
	assert_equal(html, "Little <strong>Women</strong>", "plural form highlighted")


def test_highlight_many_and_none(parser):
	html = parser.highlight("Good Boys // Buenos", HighlightTarget.many(['good', 'boy']))
	assert_equal(html, "<strong>Good</strong> <strong>Boys</strong>", "several words")
	assert_equal(parser.highlight("Tom & Jerry", HighlightTarget.none()), "Tom &amp; Jerry", "escaped, nothing wrapped")


def test_normalize_title_key():
	assert_equal(normalize_title_key("  The Good MAN "), "the good man", "trimmed lowercase key")


def test_highlight_many_rejects_a_bare_string():
	with pytest.raises(TypeError):
		HighlightTarget.many('good')
	assert_equal(HighlightTarget.many(('good',)), HighlightTarget.single('good'), "tuple of one equals single")
