"""
Re-derive the heatmap vocabulary from the title table.

This script:
1) Loads titles from the configured CSV (HEATMAP_DATA_PATH)
2) Counts the words of titles with at most 5 English words, minus the stoplist
3) Logs the most frequent words as a list ready to paste into TOP_WORDS

Usage:
    python -m scripts.derive_top_words
"""

from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from titleheat.config import Settings, configure_logging  # environment settings
from titleheat.data_loader import DataLoader  # data ingestion
from titleheat.vocabulary import TOP_WORDS  # current rows, for comparison
from titleheat.word_counts import TOP_WORD_COUNT, count_title_words  # counting rules


def main():
	settings = Settings.from_env()
	configure_logging(settings.log_level)

	logger.info("=" * 60)
	logger.info("Derive Top Title Words")
	logger.info("=" * 60)

	root = Path(__file__).resolve().parents[1]  # project root
	data_path = root / settings.data_path  # input dataset

	# 1) Load data
	logger.info("[1/2] Loading titles...")
	loaded = DataLoader().load_records_from_csv(str(data_path))
	logger.info(f"[OK] Loaded {len(loaded.records)} titles ({len(loaded.errors)} rejected rows)")

	# 2) Count
	logger.info("[2/2] Counting words...")
	counts = count_title_words(loaded.records)
	top = counts.most_common(TOP_WORD_COUNT)
	for rank, (word, count) in enumerate(top, 1):
		logger.info(f"{rank:>3}. {word:<15} {count}")

	words = [word for word, _ in top]
	added = [w for w in words if w not in TOP_WORDS]
	dropped = [w for w in TOP_WORDS if w not in words]
	logger.info(f"[OK] {len(added)} words not in TOP_WORDS, {len(dropped)} TOP_WORDS not in the top list")
	logger.info(f"TOP_WORDS = {words!r}")
	logger.info("=" * 60)


if __name__ == '__main__':
	main()
