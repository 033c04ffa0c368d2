"""
FastAPI server exposing the heatmap read interfaces.
Endpoints:
- GET /health: basic health check
- GET /cells: every non-empty (runtime bucket, word) cell
- GET /cells/{bucket}/{word}: one cell with its movies
- GET /grid: the full fixed grid of average views (null where empty)
- GET /categories and /categories/{name}: category aggregation
- GET /legend?value=...&tolerance=...: movies of cells near a legend value

Startup loads the CSV named by HEATMAP_DATA_PATH and enriches it through TMDB
when TMDB_API_TOKEN is set.
"""

# Import standard libraries for timing
import time  # measure startup latency
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, HTTPException, Query  # FastAPI primitives
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for the pipeline and display helpers
from titleheat.config import Settings, configure_logging  # environment settings
from titleheat.heatmap import HeatmapEngine  # core pipeline
from titleheat.models import HighlightTarget, MovieDetail, WordBucketCell  # domain types
from titleheat.sentiment import average_sentiment, to_percentage  # display scale
from titleheat.tmdb_client import poster_url  # full poster URLs

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Title Word Heatmap API", version="1.0.0")  # web app

# Globals that hold the engine instance and measured startup time
ENGINE: Optional[HeatmapEngine] = None  # will point to the initialized engine
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# Pydantic model that describes the shape of a single movie in responses
class MovieOut(BaseModel):
	id: str  # external id
	title: str  # original title
	title_html: str  # English title with the cell word(s) emphasized
	views: int  # view count
	runtime: int  # minutes
	poster_url: Optional[str] = None  # full poster image URL
	description: Optional[str] = None  # overview
	sentiment: Optional[float] = None  # raw overall sentiment
	sentiment_percent: int = 0  # overall sentiment on the [-100, 100] display scale
	production_countries: List[str]  # ISO codes
	categories: List[str]  # categories of the cell word


# Pydantic model for a single heatmap cell
class CellOut(BaseModel):
	bucket: int  # runtime bucket in minutes
	word: str  # canonical word
	average_views: int  # rounded mean views
	movie_count: int  # deduplicated movies in the cell
	movies: List[MovieOut] = []  # omitted in the list endpoint


class GridOut(BaseModel):
	words: List[str]  # rows
	buckets: List[int]  # columns
	values: List[List[Optional[int]]]  # average views, null where no movie matched
	min_views: int
	max_views: int
	min_sentiment: Optional[float] = None
	max_sentiment: Optional[float] = None


class CategoryOut(BaseModel):
	name: str
	words: List[str]
	average_views: int
	sentiment_percent: Optional[int] = None  # average over movies with sentiment
	poster_ids: List[str]  # initial pinned posters
	cells: List[CellOut]  # contributing cells, without movies
	movies: List[MovieOut]


class LegendOut(BaseModel):
	value: float  # queried legend value
	tolerance: float  # tolerance actually applied
	words: List[str]  # words of the qualifying cells
	total: int  # movies before the limit
	movies: List[MovieOut]


def _require_engine() -> HeatmapEngine:
	if ENGINE is None:  # engine must be ready to serve
		logger.warning("[API] Request received but engine not initialized")  # guard log
		raise HTTPException(status_code=503, detail="Heatmap engine is not ready")
	return ENGINE


def _movie_out(engine: HeatmapEngine, movie: MovieDetail, target: HighlightTarget) -> MovieOut:
	return MovieOut(
		id=movie.id,
		title=movie.title,
		title_html=engine.parser.highlight(movie.title, target),
		views=movie.views,
		runtime=movie.runtime,
		poster_url=poster_url(movie.poster_path),
		description=movie.description or None,
		sentiment=movie.sentiment,
		sentiment_percent=to_percentage(movie.sentiment, engine.sentiment_range),
		production_countries=sorted(movie.production_countries),
		categories=list(movie.categories),
	)


def _cell_out(engine: HeatmapEngine, cell: WordBucketCell, with_movies: bool = False) -> CellOut:
	movies = []
	if with_movies:
		target = HighlightTarget.single(cell.word)
		movies = [_movie_out(engine, m, target) for m in cell.movies]
	return CellOut(
		bucket=cell.bucket,
		word=cell.word,
		average_views=cell.average_views,
		movie_count=len(cell.movies),
		movies=movies,
	)


# FastAPI startup hook to build the heatmap once
@app.on_event("startup")
async def startup_event():
	"""Load, enrich and aggregate the title table and log how long it took."""
	global ENGINE, STARTUP_TIME_S  # refer to module-level globals
	start = time.time()  # start timer for startup latency

	settings = Settings.from_env()  # environment-driven settings
	configure_logging(settings.log_level)  # apply requested verbosity
	logger.info(f"[API] Startup: building heatmap from {settings.data_path}...")  # log intent

	ENGINE = HeatmapEngine.from_csv(settings=settings)  # create engine

	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s. {len(ENGINE.cells)} cells.")  # summary log


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"engine_ready": ENGINE is not None,  # True if engine initialized
		"startup_seconds": round(STARTUP_TIME_S, 2),  # startup latency
		"movie_count": ENGINE.total_movie_count if ENGINE else 0,  # unique titles in the heatmap
		"row_errors": len(ENGINE.errors) if ENGINE else 0,  # rejected rows
		"lookup_errors": len(ENGINE.lookup_errors) if ENGINE else 0,  # failed lookups
	}


@app.get("/cells", response_model=List[CellOut])
async def list_cells():
	"""Every non-empty cell, without movie details."""
	engine = _require_engine()
	return [_cell_out(engine, c) for c in engine.cells]


@app.get("/cells/{bucket}/{word}", response_model=CellOut)
async def get_cell(bucket: int, word: str):
	"""One cell with its deduplicated movies."""
	engine = _require_engine()
	cell = engine.cell(bucket, word.lower())
	if cell is None:
		raise HTTPException(status_code=404, detail=f"No movies for '{word}' at {bucket} minutes")
	return _cell_out(engine, cell, with_movies=True)


@app.get("/grid", response_model=GridOut)
async def get_grid():
	"""Full fixed grid for rendering."""
	engine = _require_engine()
	low, high = engine.view_bounds
	return GridOut(
		words=engine.vocabulary,
		buckets=engine.runtime_buckets,
		values=engine.grid(),
		min_views=low,
		max_views=high,
		min_sentiment=engine.sentiment_range.min_score,
		max_sentiment=engine.sentiment_range.max_score,
	)


@app.get("/categories")
async def list_categories():
	engine = _require_engine()
	return [{"name": c.name, "words": list(c.words)} for c in engine.categories]


@app.get("/categories/{name}", response_model=CategoryOut)
async def get_category(name: str, pinned: List[str] = Query(default=[], description="Movie ids pinned to the top")):
	"""Movies of every cell whose word belongs to the category."""
	engine = _require_engine()
	aggregate = engine.category(name, priority_ids=pinned)
	if aggregate is None:
		raise HTTPException(status_code=404, detail=f"Unknown category '{name}'")

	avg = average_sentiment(aggregate.movies)
	target = HighlightTarget.many(aggregate.category.words)
	logger.debug(f"[API] /categories/{name} -> {len(aggregate.movies)} movies")  # trace
	return CategoryOut(
		name=aggregate.category.name,
		words=list(aggregate.category.words),
		average_views=aggregate.average_views,
		sentiment_percent=to_percentage(avg, engine.sentiment_range) if avg is not None else None,
		poster_ids=list(aggregate.poster_ids),
		cells=[_cell_out(engine, c) for c in aggregate.cells],
		movies=[_movie_out(engine, m, target) for m in aggregate.movies],
	)


@app.get("/legend", response_model=LegendOut)
async def legend(
	value: float = Query(..., description="Average-views value on the legend"),
	tolerance: Optional[float] = Query(None, ge=0, description="Defaults to 5% of the views range"),
	limit: int = Query(20, ge=1, le=500),
):
	"""Movies from the cells whose average lies within tolerance of the value."""
	engine = _require_engine()
	applied = tolerance if tolerance is not None else engine.default_tolerance()
	movies = engine.legend(value, applied)
	words = engine.legend_words(value, applied)
	target = HighlightTarget.many(words)
	return LegendOut(
		value=value,
		tolerance=applied,
		words=words,
		total=len(movies),
		movies=[_movie_out(engine, m, target) for m in movies[:limit]],
	)
