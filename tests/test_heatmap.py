"""
End-to-end tests for HeatmapEngine: filter -> enrich -> aggregate -> queries.
Run: pytest tests/test_heatmap.py
"""

from pathlib import Path

from titleheat.config import Settings
from titleheat.errors import EnrichmentLookupFailed
from titleheat.heatmap import HeatmapEngine
from titleheat.models import CategoryDefinition, RawTitleRecord, TitleMetadata

SAMPLE_CSV = Path(__file__).resolve().parents[1] / 'data' / 'sample_titles.csv'


def zero_scorer(text):
	return 0.0


def lookup_failing_for(failing_id):
	def lookup(external_id):
		if external_id == failing_id:
			raise EnrichmentLookupFailed(external_id, 'timeout')
		return TitleMetadata(poster_path=f'/{external_id}.jpg', description='Fine. Okay.')
	return lookup


def record(title, runtime, views, external_id):
	return RawTitleRecord(title=title, runtime=runtime, views=views, external_id=external_id)


def test_failed_lookup_still_counts_toward_average():
	records = [
		record('Good Dog', '1:30', '100', 'a'),
		record('Bad Dog', '1:31', '200', 'b'),
		record('Big Dog', '1:29', '600', 'c'),
	]
	engine = HeatmapEngine(records, lookup=lookup_failing_for('b'), scorer=zero_scorer, pause_seconds=0)
	cell = engine.cell(90, 'dog')

	assert cell.average_views == 300
	assert len(cell.movies) == 3
	by_id = {m.id: m for m in cell.movies}
	assert by_id['b'].poster_path == '' and by_id['b'].sentiment is None
	assert by_id['a'].poster_path == '/a.jpg' and by_id['a'].sentiment == 0.0
	assert [e.external_id for e in engine.lookup_errors] == ['b']


def test_long_titles_and_non_matching_titles_are_excluded():
	records = [
		record('The Good Man Who Was Never Found', '1:30', '100', 'long'),
		record('Unrelated Title', '1:30', '100', 'none'),
		record('Good Man', '1:30', '100', 'ok'),
	]
	engine = HeatmapEngine(records, scorer=zero_scorer)
	assert engine.total_movie_count == 1
	assert {m.id for c in engine.cells for m in c.movies} == {'ok'}


def test_grid_covers_the_full_fixed_space():
	engine = HeatmapEngine(
		[record('Love', '1:30', '100', 'a')],
		scorer=zero_scorer,
		vocabulary=['love', 'man'],
		runtime_buckets=[80, 90, 100],
	)
	assert engine.grid() == [[None, 100, None], [None, None, None]]
	assert engine.view_bounds == (100, 100)


def test_category_and_legend_queries():
	categories = [CategoryDefinition('Pets', ('dog', 'cat'))]
	records = [
		record('Good Dog', '1:30', '100', 'a'),
		record('Cat', '2:00', '300', 'b'),
		record('Love', '2:00', '5,000', 'c'),
	]
	engine = HeatmapEngine(records, scorer=zero_scorer, vocabulary=['dog', 'cat', 'love', 'good'], categories=categories)

	pets = engine.category('pets')
	assert [m.id for m in pets.movies] == ['b', 'a']
	assert pets.average_views == 200
	assert engine.category('Nope') is None

	assert engine.default_tolerance() == (5000 - 100) * 0.05
	assert [m.id for m in engine.legend(5000)] == ['c']
	assert engine.legend_words(100, tolerance=0) == ['dog', 'good']


def test_from_csv_without_token_skips_enrichment():
	settings = Settings(data_path=str(SAMPLE_CSV), tmdb_api_token='')
	engine = HeatmapEngine.from_csv(settings=settings, scorer=zero_scorer)

	assert engine.cells
	assert all(m.sentiment is None for c in engine.cells for m in c.movies)
	assert [e.field for e in engine.errors] == ['Runtime']
	# 6-word title in the sample never reaches the heatmap
	assert all(m.id != 'tt0000005' for c in engine.cells for m in c.movies)
	good = engine.cell(90, 'good')
	assert good.average_views == 2000000


def test_invalid_duplicate_does_not_hide_valid_row():
	records = [
		record('Love', '1:30', '100', 'a'),
		record('Love', 'ninety', '500', 'b'),
	]
	engine = HeatmapEngine(records, scorer=zero_scorer)

	cell = engine.cell(90, 'love')
	assert cell is not None
	assert [m.id for m in cell.movies] == ['a']
	assert cell.average_views == 100
	assert [(e.row, e.field, e.value) for e in engine.errors] == [(2, 'Runtime', 'ninety')]
