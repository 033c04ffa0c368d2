"""
TMDB metadata client.
Looks titles up by IMDb id and returns poster, overview and production countries.
Results are cached per external id so repeated loads never re-fetch them.
"""

import threading  # guards the shared cache
from typing import Optional  # type annotations

import requests  # HTTP client
from cachetools import LRUCache  # bounded per-id cache

from loguru import logger  # console logging

from .models import TitleMetadata  # lookup result
from .errors import EnrichmentLookupFailed  # lookup error type


TMDB_API_URL = 'https://api.themoviedb.org/3'
TMDB_IMAGE_URL = 'https://image.tmdb.org/t/p/w1280/'

_MISSING = object()  # cache sentinel; None is a valid cached value ("not found")


def poster_url(poster_path: str, base: str = TMDB_IMAGE_URL) -> Optional[str]:
	"""Full image URL for a poster path, or None when the title has no poster."""
	if not poster_path:
		return None
	return base.rstrip('/') + '/' + poster_path.lstrip('/')


class TMDBClient:
	"""
	Resolves IMDb ids to TMDB movie or TV details.
	lookup() returns None when TMDB has no match and raises EnrichmentLookupFailed
	on transport, HTTP or decoding errors (failures are not cached).
	"""

	def __init__(
		self,
		api_token: str,
		timeout: float = 10.0,  # seconds per request
		cache_size: int = 50_000,  # max cached ids
		base_url: str = TMDB_API_URL,
		session: Optional[requests.Session] = None,
	):
		if not api_token:
			raise ValueError("TMDB API token is required")
		self.base_url = base_url.rstrip('/')
		self.timeout = timeout
		self.session = session or requests.Session()
		self.session.headers.update({
			'accept': 'application/json',
			'Authorization': f'Bearer {api_token}',
		})
		self._cache = LRUCache(maxsize=cache_size)
		self._lock = threading.Lock()

	def lookup(self, external_id: str) -> Optional[TitleMetadata]:
		with self._lock:
			cached = self._cache.get(external_id, _MISSING)
		if cached is not _MISSING:
			return cached

		metadata = self._fetch(external_id)

		# Insert if absent: a concurrent lookup for the same id may have finished first
		with self._lock:
			if external_id not in self._cache:
				self._cache[external_id] = metadata
			return self._cache[external_id]

	def cached_ids(self):
		with self._lock:
			return list(self._cache.keys())

	def _fetch(self, external_id: str) -> Optional[TitleMetadata]:
		logger.debug(f"[TMDB] Fetching {external_id}")
		found = self._get_json(f"{self.base_url}/find/{external_id}", external_id, params={'external_source': 'imdb_id'})

		# Prefer movie results; fall back to TV results
		media_type, results = 'movie', found.get('movie_results') or []
		if not results:
			media_type, results = 'tv', found.get('tv_results') or []
		if not results:
			logger.debug(f"[TMDB] No match for {external_id}")
			return None

		tmdb_id = results[0].get('id')
		if tmdb_id is None:
			return None

		details = self._get_json(f"{self.base_url}/{media_type}/{tmdb_id}", external_id)
		countries = frozenset(
			c.get('iso_3166_1') for c in (details.get('production_countries') or [])
			if c.get('iso_3166_1')
		)
		return TitleMetadata(
			poster_path=details.get('poster_path') or '',
			description=details.get('overview') or '',
			production_countries=countries,
		)

	def _get_json(self, url: str, external_id: str, params=None) -> dict:
		try:
			resp = self.session.get(url, params=params, timeout=self.timeout)
			resp.raise_for_status()
			data = resp.json()
		except requests.RequestException as e:
			raise EnrichmentLookupFailed(external_id, str(e)) from e
		except ValueError as e:  # body is not JSON
			raise EnrichmentLookupFailed(external_id, f"invalid JSON: {e}") from e
		if not isinstance(data, dict):
			raise EnrichmentLookupFailed(external_id, "unexpected response shape")
		return data
