"""
Streamlit UI for Reel Search.
Draws the ViewState held by a ViewStateController; every button maps to one
controller call. Talks to the local FastAPI proxy (no API key in the UI) and
keeps the watchlist in a JSON file on this machine.

Run API:  uvicorn api:app --port 3000
Run UI:   streamlit run streamlit_app.py
"""

# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Loguru for console diagnostics from the render sink
from loguru import logger  # console logger

# Project imports: settings, HTTP gateway client, watchlist store and controller
from reel_search.client import GatewayClient  # calls the proxy over HTTP
from reel_search.config import Settings  # API URL and watchlist path
from reel_search.models import MediaType  # type filter values
from reel_search.sorting import SORT_LABELS, SortMode, use_system_collation  # sort picker, title collation
from reel_search.view_state import Renderer, Screen, ViewState, ViewStateController  # state machine
from reel_search.watchlist import JsonFileStorage, ToggleState, WatchlistStore  # durable watchlist

# Options of the type select: label -> filter value
TYPE_OPTIONS = {"All types": None, "Movies": MediaType.MOVIE, "Series": MediaType.SERIES}

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Reel Search", layout="wide")  # wide layout
use_system_collation()  # titles sort by the user's locale


class StreamlitRenderer(Renderer):
	"""Streamlit redraws the whole page on every rerun, so the sink only logs."""

	def render(self, state: ViewState) -> None:
		logger.debug(f"[UI] state screen={state.screen.value} loading={state.loading} results={len(state.results)}")

	def update_toggle(self, toggle: ToggleState) -> None:
		logger.debug(f"[UI] toggle {toggle.record_id} -> {toggle.aria_label}")


def get_controller() -> ViewStateController:
	"""One controller per browser session."""
	if "controller" not in st.session_state:
		settings = Settings.from_env()  # REEL_API_URL / REEL_WATCHLIST_PATH
		gateway = GatewayClient(settings.client_base_url)  # proxy client
		watchlist = WatchlistStore(JsonFileStorage(settings.watchlist_path))  # persisted entries
		st.session_state["controller"] = ViewStateController(gateway, watchlist, StreamlitRenderer())
	return st.session_state["controller"]


def act(fn, *args):
	"""Run a controller action, then redraw from the new state."""
	fn(*args)
	st.rerun()


def draw_card(view, key_prefix: str, controller: ViewStateController, on_watchlist_screen: bool = False):
	"""One record: poster, title/year/type, details button and watchlist toggle."""
	record = view.record
	if record.has_poster:
		st.image(record.poster_url, width='stretch')  # poster
	else:
		st.markdown("### 🎬")  # placeholder
	st.markdown(f"**{record.title}**")
	st.caption(f"{record.year} · {record.media_type.value}" if record.year else record.media_type.value)
	c1, c2 = st.columns(2)
	if c1.button("Details", key=f"{key_prefix}-open-{record.id}"):
		act(controller.open_detail, record.id)
	toggle = view.toggle
	if c2.button(toggle.icon, key=f"{key_prefix}-wl-{record.id}", help=toggle.aria_label):
		if on_watchlist_screen:
			act(controller.remove_from_watchlist, record.id)
		else:
			act(controller.toggle_watchlist, record)


def draw_grid(views, key_prefix: str, controller: ViewStateController, on_watchlist_screen: bool = False, columns: int = 5):
	for start in range(0, len(views), columns):
		cols = st.columns(columns)
		for col, view in zip(cols, views[start:start + columns]):
			with col:
				draw_card(view, key_prefix, controller, on_watchlist_screen)


controller = get_controller()
state = controller.state

# Sidebar navigation between the search and watchlist screens
with st.sidebar:
	st.header("Reel Search")  # section label
	if st.button("Search"):
		act(controller.show_screen, Screen.SEARCH)
	badge = f" ({state.watchlist_count})" if state.watchlist_count else ""
	if st.button(f"Watchlist{badge}"):
		act(controller.show_screen, Screen.WATCHLIST)

# Main page title
st.title("🎬 Reel Search")  # friendly header

# Shared indicators
if state.error:
	st.error(state.error)  # inline error for the active screen

if state.screen is Screen.SEARCH:
	# Search form: query, type filter and sort
	with st.form("search-form"):
		query = st.text_input("Movie or series", value=state.query, placeholder="e.g. Inception")
		c1, c2 = st.columns(2)
		type_labels = list(TYPE_OPTIONS)
		current_type = next(label for label, value in TYPE_OPTIONS.items() if value == state.type_filter)
		type_label = c1.selectbox("Type", type_labels, index=type_labels.index(current_type))
		modes = list(SortMode)
		sort_mode = c2.selectbox("Sort", modes, index=modes.index(state.sort_mode), format_func=lambda m: SORT_LABELS[m])
		submitted = st.form_submit_button("Search", type="primary")
	if submitted:
		controller.set_type_filter(TYPE_OPTIONS[type_label])
		controller.set_sort_mode(sort_mode)
		act(controller.search, query)

	if state.empty_message:
		st.info(state.empty_message)  # empty state, distinct from errors
	if state.results_visible:
		st.subheader(state.heading)
		draw_grid(list(state.results), "res", controller)
	if state.pagination:
		cols = st.columns(len(state.pagination))
		for col, button in zip(cols, state.pagination):
			if col.button(button.label, key=f"page-{button.label}", type="primary" if button.current else "secondary"):
				act(controller.go_to_page, button.page)

elif state.screen is Screen.DETAIL:
	if st.button("← Back"):
		act(controller.back)
	detail = state.detail
	if detail is not None:
		record = detail.record
		c1, c2 = st.columns([1, 3])  # poster column + info column
		with c1:
			if record.has_poster:
				st.image(record.poster_url, width='stretch')
			else:
				st.markdown("## 🎬")
		with c2:
			st.header(record.title)
			if detail.meta:
				st.caption(detail.meta)
			if detail.rating_pills:
				st.markdown("  ".join(f"`{label}: {value}`" for label, value in detail.rating_pills))
			if st.button(detail.toggle.button_label, key=f"detail-wl-{record.id}"):
				act(controller.toggle_watchlist, record)
			st.link_button("▶ Watch trailer", detail.trailer_url)
			if detail.plot:
				st.write(detail.plot)
			for label, value in detail.rows:
				st.write(f"**{label}:** {value}")
		if state.related is not None:
			st.divider()
			st.subheader(state.related.heading)
			draw_grid(list(state.related.records), "rel", controller, columns=6)

else:
	st.subheader("Your watchlist")
	if state.watchlist_label:
		st.caption(state.watchlist_label)
	if not state.watchlist:
		st.info("Your watchlist is empty. Add titles from search results.")
	else:
		draw_grid(list(state.watchlist), "wl", controller, on_watchlist_screen=True)

# Footer indicator of where the UI sends requests
st.sidebar.markdown("---")  # separator
st.sidebar.caption(f"API: {controller.gateway.base_url}")  # proxy location
