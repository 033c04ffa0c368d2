"""
API tests: the FastAPI endpoints over a small in-memory heatmap.
Run: pytest tests/test_api.py
"""

import pytest
from fastapi.testclient import TestClient

import api
from titleheat.heatmap import HeatmapEngine
from titleheat.models import CategoryDefinition, RawTitleRecord, TitleMetadata


def scorer(text):
	return 1.0 if 'good' in text.lower() else -1.0


def lookup(external_id):
	if external_id == 'missing':
		return None
	return TitleMetadata(poster_path=f'/{external_id}.jpg', description='Good times.', production_countries=frozenset({'US'}))


@pytest.fixture
def client(monkeypatch):
	records = [
		RawTitleRecord('The Good Man', '1:30', '1,000,000', 'a'),
		RawTitleRecord('Good Men', '1:34', '3,000,000', 'b'),
		RawTitleRecord('Little Women', '2:15', '9,000,000', 'missing'),
	]
	engine = HeatmapEngine(
		records,
		lookup=lookup,
		scorer=scorer,
		vocabulary=['good', 'man', 'woman', 'little'],
		categories=[CategoryDefinition('People', ('man', 'woman'))],
		pause_seconds=0,
	)
	monkeypatch.setattr(api, 'ENGINE', engine)
	return TestClient(api.app)


def test_health(client):
	body = client.get('/health').json()
	assert body['engine_ready'] is True
	assert body['movie_count'] == 3


def test_cells_and_cell_detail(client):
	cells = client.get('/cells').json()
	assert {(c['bucket'], c['word']) for c in cells} == {(90, 'good'), (90, 'man'), (140, 'woman'), (140, 'little')}

	man = client.get('/cells/90/man').json()
	assert man['average_views'] == 2000000
	assert [m['id'] for m in man['movies']] == ['a', 'b']
	assert man['movies'][1]['title_html'] == 'Good <strong>Men</strong>'
	assert man['movies'][0]['poster_url'].endswith('/a.jpg')
	assert man['movies'][0]['sentiment_percent'] == 100

	assert client.get('/cells/90/woman').status_code == 404


def test_grid(client):
	grid = client.get('/grid').json()
	assert grid['words'] == ['good', 'man', 'woman', 'little']
	row = grid['values'][grid['words'].index('woman')]
	assert row[grid['buckets'].index(140)] == 9000000
	assert grid['min_views'] == 2000000 and grid['max_views'] == 9000000


def test_category(client):
	body = client.get('/categories/People', params={'pinned': ['b']}).json()
	assert [m['id'] for m in body['movies']] == ['b', 'missing', 'a']
	assert body['average_views'] == 4333333
	assert client.get('/categories/Unknown').status_code == 404
	assert client.get('/categories').json() == [{'name': 'People', 'words': ['man', 'woman']}]


def test_legend(client):
	body = client.get('/legend', params={'value': 9000000, 'tolerance': 0}).json()
	assert body['words'] == ['woman', 'little']
	assert [m['id'] for m in body['movies']] == ['missing']
	assert body['movies'][0]['sentiment_percent'] == 0


def test_not_ready(monkeypatch):
	monkeypatch.setattr(api, 'ENGINE', None)
	assert TestClient(api.app).get('/cells').status_code == 503
