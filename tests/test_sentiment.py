"""
Unit tests for sentence splitting, VADER scoring and the sentiment range.
Run: pytest tests/test_sentiment.py
"""

from titleheat.models import MovieDetail
from titleheat.sentiment import SentimentRange, SentimentScorer, average_sentiment, split_sentences, to_percentage


def test_split_sentences():
	text = "A man returns home. Nobody expects him! Will he stay?  "
	assert split_sentences(text) == ["A man returns home.", "Nobody expects him!", "Will he stay?"]
	assert split_sentences("No terminal punctuation") == ["No terminal punctuation"]
	assert split_sentences("Wait... what?") == ["Wait.", "what?"]
	assert split_sentences("") == []


def test_vader_polarity():
	scorer = SentimentScorer()
	assert scorer("A wonderful, happy and beautiful love story.") > 0
	assert scorer("A horrible, brutal and terrifying murder.") < 0
	assert scorer("") == 0.0


def test_range_accumulates():
	rng = SentimentRange()
	assert rng.is_empty
	rng.observe_all([0.2, -0.4, 0.9])
	assert (rng.min_score, rng.max_score) == (-0.4, 0.9)

	rng.observe(-0.8)
	assert (rng.min_score, rng.max_score) == (-0.8, 0.9)


def test_to_percentage():
	rng = SentimentRange(-0.5, 0.8)
	assert to_percentage(0.8, rng) == 100
	assert to_percentage(0.4, rng) == 50
	assert to_percentage(-0.25, rng) == -50
	assert to_percentage(0.0, rng) == 0
	assert to_percentage(None, rng) == 0
	assert to_percentage(0.3, SentimentRange()) == 0


def test_average_sentiment_ignores_missing():
	movies = [
		MovieDetail(title='a', views=1, runtime=90, id='a', word='good', sentiment=0.5),
		MovieDetail(title='b', views=1, runtime=90, id='b', word='good', sentiment=None),
		MovieDetail(title='c', views=1, runtime=90, id='c', word='good', sentiment=-0.1),
	]
	assert abs(average_sentiment(movies) - 0.2) < 1e-9
	assert average_sentiment(movies[1:2]) is None
