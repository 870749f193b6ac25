"""FastAPI app, CORS, and route registration."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from autocue.config import LOG_LEVEL

# Configure logging in the worker process (so engine skip warnings are visible with uvicorn --reload)
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(levelname)s: %(name)s: %(message)s",
)

from autocue.api.state import AppState, get_state

# Import routes after state to avoid circular imports
from autocue.api.routes import collection, cues

__all__ = ["app", "AppState", "get_state"]

app = FastAPI(
    title="Autocue API",
    description="Add memory cues and hot cues to Rekordbox collection XML",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(collection.router, prefix="/api/collection", tags=["collection"])
app.include_router(cues.router, prefix="/api/cues", tags=["cues"])
