"""
Build the heatmap cell dataset and export it.

This script:
1) Loads titles from the configured CSV (HEATMAP_DATA_PATH)
2) Enriches them through TMDB when TMDB_API_TOKEN is set
3) Aggregates them into (runtime bucket, word) cells
4) Writes the cells and the sentiment range to data/heatmap_cells.json

Usage:
    python -m scripts.build_heatmap
"""

import json  # export format
import time  # measure step timings
from dataclasses import asdict  # dataclass -> dict
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from titleheat.config import Settings, configure_logging  # environment settings
from titleheat.data_loader import DataLoader  # data ingestion
from titleheat.heatmap import HeatmapEngine  # pipeline
from titleheat.tmdb_client import TMDBClient  # metadata collaborator


def _json_default(value):
	if isinstance(value, (set, frozenset)):
		return sorted(value)  # country codes
	raise TypeError(f"Cannot serialize {type(value).__name__}")


def main():
	settings = Settings.from_env()  # env-driven configuration
	configure_logging(settings.log_level)

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Build Title Word Heatmap")
	logger.info("=" * 60)

	# Resolve project root and key paths
	root = Path(__file__).resolve().parents[1]  # project root
	data_path = root / settings.data_path  # input dataset
	out_path = root / 'data' / 'heatmap_cells.json'  # output file

	# 1) Load data
	logger.info("[1/3] Loading titles...")
	loader = DataLoader()  # loader instance
	loaded = loader.load_records_from_csv(str(data_path))  # read dataset
	logger.info(
		f"[OK] Loaded {len(loaded.records)} titles, {len(loader.get_all_external_ids(loaded.records))} external ids, {len(loaded.errors)} rejected rows"
	)

	# 2) Enrich + aggregate
	logger.info("[2/3] Enriching and aggregating...")
	t0 = time.time()  # start timer
	lookup = None
	if settings.enrichment_enabled:
		lookup = TMDBClient(settings.tmdb_api_token, timeout=settings.tmdb_timeout, cache_size=settings.tmdb_cache_size).lookup
	else:
		logger.warning("TMDB_API_TOKEN not set; skipping metadata lookups")
	engine = HeatmapEngine(
		loaded.records,
		lookup=lookup,
		batch_size=settings.tmdb_batch_size,
		pause_seconds=settings.tmdb_batch_pause,
		load_errors=loaded.errors,
	)
	logger.info(f"[OK] {len(engine.cells)} cells from {engine.total_movie_count} titles in {time.time() - t0:.2f}s")

	# 3) Export
	logger.info("[3/3] Writing cells...")
	payload = {
		'words': engine.vocabulary,
		'buckets': engine.runtime_buckets,
		'min_sentiment': engine.sentiment_range.min_score,
		'max_sentiment': engine.sentiment_range.max_score,
		'cells': [asdict(c) for c in engine.cells],
		'errors': [asdict(e) for e in engine.errors],
	}
	out_path.parent.mkdir(parents=True, exist_ok=True)  # ensure exists
	with open(out_path, 'w', encoding='utf-8') as f:
		json.dump(payload, f, default=_json_default, ensure_ascii=False, indent=2)
	logger.info(f"[OK] Saved to {out_path}")  # done
	logger.info("=" * 60)


if __name__ == '__main__':
	main()  # invoke builder
