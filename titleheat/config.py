"""
Runtime settings, read from environment variables.
"""

import os  # environment access
import sys  # stderr sink for loguru
from dataclasses import dataclass  # settings container

from loguru import logger  # console logging


@dataclass
class Settings:
	data_path: str = 'data/sample_titles.csv'  # input table
	tmdb_api_token: str = ''  # empty disables enrichment
	tmdb_batch_size: int = 40  # concurrent lookups per batch
	tmdb_batch_pause: float = 1.0  # seconds between batches
	tmdb_timeout: float = 10.0  # seconds per request
	tmdb_cache_size: int = 50_000  # cached external ids
	log_level: str = 'INFO'

	@classmethod
	def from_env(cls) -> 'Settings':
		"""Build settings from HEATMAP_* / TMDB_* variables, falling back to defaults."""
		defaults = cls()
		return cls(
			data_path=os.getenv('HEATMAP_DATA_PATH', defaults.data_path),
			tmdb_api_token=os.getenv('TMDB_API_TOKEN', defaults.tmdb_api_token),
			tmdb_batch_size=int(os.getenv('TMDB_BATCH_SIZE', defaults.tmdb_batch_size)),
			tmdb_batch_pause=float(os.getenv('TMDB_BATCH_PAUSE', defaults.tmdb_batch_pause)),
			tmdb_timeout=float(os.getenv('TMDB_TIMEOUT', defaults.tmdb_timeout)),
			tmdb_cache_size=int(os.getenv('TMDB_CACHE_SIZE', defaults.tmdb_cache_size)),
			log_level=os.getenv('LOG_LEVEL', defaults.log_level).upper(),
		)

	@property
	def enrichment_enabled(self) -> bool:
		return bool(self.tmdb_api_token)


def configure_logging(level: str = 'INFO'):
	"""Replace loguru's default sink with one at the requested level."""
	logger.remove()
	logger.add(sys.stderr, level=level)
