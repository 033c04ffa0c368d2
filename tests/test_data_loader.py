"""
Unit tests for DataLoader: CSV loading, column checks and per-row rejection.
Run: pytest tests/test_data_loader.py
"""

from pathlib import Path

import pytest

from titleheat.data_loader import DataLoader
from titleheat.errors import MissingColumnsError
from titleheat.models import RawTitleRecord

SAMPLE_CSV = Path(__file__).resolve().parents[1] / 'data' / 'sample_titles.csv'


def write_csv(tmp_path, text):
	path = tmp_path / 'titles.csv'
	path.write_text(text, encoding='utf-8')
	return path


def test_load_sample_file():
	"""The bundled sample loads, with its one malformed runtime rejected."""
	loader = DataLoader()
	result = loader.load_records_from_csv(str(SAMPLE_CSV))

	assert len(result.records) > 10
	assert len(result.errors) == 1
	assert result.errors[0].field == 'Runtime'
	assert result.errors[0].value == 'ninety'

	first = result.records[0]
	assert first.title == 'The Good Man'
	assert first.runtime == '1:30'
	assert first.views == '1,000,000'
	assert first.external_id == 'tt0000001'


def test_rows_with_bad_values_are_rejected(tmp_path):
	path = write_csv(tmp_path, (
		'Title,Runtime,Views,tconst\n'
		'Good Boy,1:30,"1,000",tt1\n'
		'Bad Runtime,130,"1,000",tt2\n'
		'Bad Views,1:30,lots,tt3\n'
		',1:30,"5",tt4\n'
	))
	result = DataLoader().load_records_from_csv(str(path))

	assert [r.title for r in result.records] == ['Good Boy']
	assert [(e.row, e.field) for e in result.errors] == [(2, 'Runtime'), (3, 'Views'), (4, 'Title')]


def test_missing_columns_is_fatal(tmp_path):
	path = write_csv(tmp_path, 'Title,Views\nGood Boy,"1,000"\n')
	with pytest.raises(MissingColumnsError) as excinfo:
		DataLoader().load_records_from_csv(str(path))
	assert excinfo.value.missing == ['Runtime', 'tconst']


def test_missing_file():
	with pytest.raises(FileNotFoundError):
		DataLoader().load_records_from_csv('does/not/exist.csv')


def test_records_from_rows_keeps_raw_strings():
	rows = [
		{'Title': ' Love Actually ', 'Runtime': '2:15', 'Views': '8,900,000', 'tconst': 'tt0314331'},
		{'Title': 'No Id', 'Runtime': '1:00', 'Views': '10', 'tconst': None},
	]
	result = DataLoader().records_from_rows(rows)

	assert result.errors == []
	assert result.records[0].title == 'Love Actually'
	assert result.records[0].views == '8,900,000'
	assert result.records[1].external_id == ''
	assert DataLoader().get_all_external_ids(result.records) == ['tt0314331']


def test_validate_records_reports_input_positions():
	records = [
		RawTitleRecord('Love', '1:30', '100', 'a'),
		RawTitleRecord('Love', 'ninety', '500', 'b'),
		RawTitleRecord('', '1:30', '100', 'c'),
	]
	result = DataLoader().validate_records(records)

	assert result.records == [records[0]]
	assert [(e.row, e.field, e.value) for e in result.errors] == [(2, 'Runtime', 'ninety'), (3, 'Title', '')]
