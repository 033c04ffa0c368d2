"""
Category aggregation module.
Re-groups heatmap cells by category membership and merges their movies.
"""

from typing import List, Sequence, Tuple

from .models import CategoryAggregate, CategoryDefinition, MovieDetail, WordBucketCell
from .aggregator import deduplicate_movies, round_half_up_mean


def sort_by_priority(movies: Sequence[MovieDetail], priority_ids: Sequence[str] = ()) -> List[MovieDetail]:
	"""
	Pinned movies first, in pinned order; everything else by views, highest first.
	"""
	rank = {movie_id: i for i, movie_id in enumerate(priority_ids)}

	def key(movie: MovieDetail):
		if movie.id in rank:
			return (0, rank[movie.id], 0)
		return (1, 0, -movie.views)

	return sorted(movies, key=key)  # stable: equal views keep their order


def initial_poster_ids(cells: Sequence[WordBucketCell]) -> Tuple[str, ...]:
	"""The first movie with a poster in each cell, in cell order, without repeats."""
	ids: List[str] = []
	for cell in cells:
		for movie in cell.movies:
			if movie.poster_path:
				if movie.id not in ids:
					ids.append(movie.id)
				break
	return tuple(ids)


def aggregate_by_category(
	cells: Sequence[WordBucketCell],
	category: CategoryDefinition,
	priority_ids: Sequence[str] = (),
) -> CategoryAggregate:
	"""Union the movies of every cell whose word belongs to the category."""
	words = set(category.words)
	selected = tuple(c for c in cells if c.word in words)
	movies = deduplicate_movies(m for cell in selected for m in cell.movies)
	average = round_half_up_mean([m.views for m in movies]) if movies else 0
	return CategoryAggregate(
		category=category,
		movies=tuple(sort_by_priority(movies, priority_ids)),
		average_views=average,
		cells=selected,
		poster_ids=initial_poster_ids(selected),
	)
