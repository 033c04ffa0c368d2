"""
Streamlit UI for the Title Word Heatmap.
Builds the heatmap locally (like the API does) and lets you drill into a cell,
a category, or a band of the color legend.

Run UI:   streamlit run streamlit_app.py
"""

# Plotly draws the heatmap grid
import plotly.graph_objects as go  # heatmap figure
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Typing to make function signatures clearer
from typing import List, Optional  # indicates values can be None

# Local engine imports
from titleheat.config import Settings  # environment settings
from titleheat.heatmap import HeatmapEngine  # load + enrich + aggregate
from titleheat.models import HighlightTarget, MovieDetail  # display types
from titleheat.sentiment import average_sentiment, to_percentage  # sentiment scale
from titleheat.tmdb_client import poster_url  # poster images

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Title Word Heatmap", layout="wide")  # wide layout

# Main page title
st.title("🎬 Words in Titles vs. Runtime")  # friendly header
st.caption("Average views of titles containing each word, by runtime (10-minute buckets)")

# Cache the engine so we only load and enrich the data once per session
@st.cache_resource(show_spinner=True)
def init_engine() -> Optional[HeatmapEngine]:
	"""Create the heatmap engine from the configured CSV."""
	try:
		return HeatmapEngine.from_csv(settings=Settings.from_env())
	except Exception as e:
		# Show an error in the UI so users know loading failed
		st.error(f"Failed to build heatmap: {e}")
		return None  # signal failure


def sentiment_label(percent: int) -> str:
	if percent == 0:
		return "Neutral"
	if percent > 0:
		return f"{percent}% positive"
	return f"{abs(percent)}% negative"


def render_movies(engine: HeatmapEngine, movies: List[MovieDetail], target: HighlightTarget, expand_ids=()):
	"""One row per movie: poster, highlighted title, views and sentiment."""
	avg = average_sentiment(movies)
	if avg is not None:
		st.write(f"Sentiment: {sentiment_label(to_percentage(avg, engine.sentiment_range))}")
	for movie in movies:
		c1, c2 = st.columns([1, 5])  # small image column + large text column
		with c1:
			url = poster_url(movie.poster_path)
			if url:
				st.image(url, width=90)  # poster
		with c2:
			st.markdown(f"{engine.parser.highlight(movie.title, target)}, {movie.views:,} views, {movie.runtime} min", unsafe_allow_html=True)
			if movie.sentiment is not None:
				st.caption(sentiment_label(to_percentage(movie.sentiment, engine.sentiment_range)))
			if movie.description:
				with st.expander("Description", expanded=movie.id in expand_ids):
					st.write(movie.description)


engine = init_engine()
if engine is None:
	st.stop()

# Display-only state: per category, poster movies pinned to the top of the list
if "pinned_ids" not in st.session_state:
	st.session_state["pinned_ids"] = {}

low, high = engine.view_bounds
with st.sidebar:
	st.header("Explore")  # section label
	st.metric("Movies", f"{engine.total_movie_count:,}")
	mode = st.radio("Select by", options=["Cell", "Category", "Legend"], index=0)
	if engine.errors:
		st.caption(f"{len(engine.errors)} rows skipped (invalid runtime or views)")

fig = go.Figure(go.Heatmap(
	z=engine.grid(),
	x=engine.runtime_buckets,
	y=engine.vocabulary,
	colorscale="Reds",
	hoverongaps=False,
	colorbar=dict(title="Avg views"),
))
fig.update_layout(height=1400, yaxis=dict(autorange="reversed"), xaxis=dict(side="top", title="Runtime (mins)"))
st.plotly_chart(fig, use_container_width=True)

st.divider()

if mode == "Cell":
	col1, col2 = st.columns(2)
	with col1:
		word = st.selectbox("Word", options=engine.vocabulary)
	with col2:
		bucket = st.selectbox("Runtime (mins)", options=engine.runtime_buckets, index=min(7, len(engine.runtime_buckets) - 1))
	cell = engine.cell(bucket, word)
	if cell is None:
		st.info("No titles for this word and runtime.")
	else:
		st.subheader(f"'{word}' at {bucket} min, {cell.average_views:,} average views")
		render_movies(engine, list(cell.movies), HighlightTarget.single(word))

elif mode == "Category":
	name = st.selectbox("Category", options=[c.name for c in engine.categories])
	pinned = st.session_state["pinned_ids"].get(name)
	if pinned is None:
		# First visit: pin the first poster of every contributing cell
		pinned = list(engine.category(name).poster_ids)
		st.session_state["pinned_ids"][name] = pinned
	aggregate = engine.category(name, priority_ids=pinned)
	st.subheader(f"{name}: {len(aggregate.movies):,} movies, {aggregate.average_views:,} average views")
	render_movies(engine, list(aggregate.movies), HighlightTarget.many(aggregate.category.words), expand_ids=pinned)

else:
	if high <= low:
		st.info("Not enough cells to scan the legend.")
	else:
		value = st.slider("Average views", min_value=low, max_value=high, value=(low + high) // 2)
		movies = engine.legend(value)
		words = engine.legend_words(value)
		st.subheader(f"{len(movies):,} movies in cells near {value:,} views")
		render_movies(engine, movies[:20], HighlightTarget.many(words))
