"""
FastAPI server exposing the Reel Search proxy gateway.
Endpoints:
- GET /health: basic health check (which upstream, whether a credential is set)
- GET /api/search?query=...&page=1&type=movie: one page of canonical records
- GET /api/detail?id=...&type=series: one canonical detail record

The upstream API key lives only in this process (read from the environment at
startup) and is never sent to clients. Failures travel as an outcome flag with
HTTP 200, except ServerMisconfigured (500) and UpstreamUnreachable (502).
"""

# Import standard libraries for timing
import time  # measure request latencies
from typing import Optional  # precise typing for clarity

# Import FastAPI for building the web API
from fastapi import FastAPI, Query  # FastAPI primitives
from fastapi.responses import JSONResponse  # explicit status codes per outcome

# Import our internal modules for settings, the gateway and the wire schemas
from reel_search.config import Settings  # environment-backed settings
from reel_search.gateway import ProxyGateway  # credential holder + adapter dispatch
from reel_search.schemas import DetailEnvelope, SearchEnvelope  # response bodies

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Reel Search API", version="1.0.0")  # web app

# Global that holds the gateway; built at startup or lazily on first request
GATEWAY: Optional[ProxyGateway] = None


def get_gateway() -> ProxyGateway:
	"""Return the process-wide gateway, building it from the environment if needed."""
	global GATEWAY  # refer to module-level global
	if GATEWAY is None:
		GATEWAY = ProxyGateway(Settings.from_env())  # adapter is fixed for the deployment
	return GATEWAY


# FastAPI startup hook to initialize the gateway once
@app.on_event("startup")
async def startup_event():
	"""Build the gateway and log how the deployment is configured."""
	gateway = get_gateway()  # reads UPSTREAM / *_KEY from the environment
	if gateway.configured:
		logger.info(f"[API] Startup complete. Proxying to '{gateway.settings.upstream_family}'.")
	else:
		# Not fatal: every request answers ServerMisconfigured until a key is set
		logger.error(f"[API] Startup: upstream '{gateway.settings.upstream_family}' is not configured; requests will fail with 500")


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	gateway = get_gateway()
	return {
		"status": "ok",  # constant indicator
		"upstream": gateway.settings.upstream_family,  # configured family
		"configured": gateway.configured,  # False until a credential is set
	}


# Search endpoint: one page of canonical records
@app.get("/api/search")
def search(
	query: str = Query("", description="Movie or series title to search for"),
	page: str = Query("1", description="1-indexed page number; anything that is not a positive integer means page 1"),
	type: str = Query("", description="movie, series (or tv), or empty for any"),
):
	"""Run a search through the configured upstream and return the canonical envelope."""
	start = time.time()  # start timer
	outcome = get_gateway().search(query, page=page, type_filter=type)  # never raises
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /api/search q='{query}' page={page} -> {outcome.outcome.value} in {elapsed_ms:.2f} ms")

	# Status follows the outcome; the body always carries the outcome flag
	return JSONResponse(status_code=outcome.status_code, content=SearchEnvelope.from_outcome(outcome).to_json())


# Detail endpoint: one canonical detail record
@app.get("/api/detail")
def detail(
	id: str = Query("", description="Canonical record id, e.g. tt1375666 or tv-1399"),
	type: str = Query("", description="Optional media type; wins over a type embedded in the id"),
):
	"""Look up a single title and return the canonical detail envelope."""
	start = time.time()  # start timer
	outcome = get_gateway().detail(id, type_filter=type)  # never raises
	elapsed_ms = (time.time() - start) * 1000  # compute ms
	logger.info(f"[API] /api/detail id='{id}' -> {outcome.outcome.value} in {elapsed_ms:.2f} ms")

	return JSONResponse(status_code=outcome.status_code, content=DetailEnvelope.from_outcome(outcome).to_json())
