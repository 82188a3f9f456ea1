"""FastAPI server for the hiring pipeline board."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hiring_board.config import get_settings
from server.routes import get_board, router
from server.websocket import websocket_endpoint

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Keep the board in sync with the backend while the server runs."""
    board = get_board()
    await board.sync.load_jobs()
    board.sync.start()
    logger.info("Board sync started (every %ss) against %s", settings.refresh_interval, settings.api_url)
    yield
    await board.sync.stop()


app = FastAPI(title="hiring_board", lifespan=lifespan)

# CORS for dev (Vite runs on different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)

# Paths
SERVER_DIR = Path(__file__).parent
STATIC_DIR = SERVER_DIR / "static"


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.websocket("/ws")
async def ws_route(websocket: WebSocket):
    """WebSocket endpoint for real-time updates."""
    await websocket_endpoint(websocket, get_board().snapshot)


# Serve static files (UI build) - mount last so API routes take precedence
if STATIC_DIR.exists():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server.app:app", host="127.0.0.1", port=8000, reload=True)
