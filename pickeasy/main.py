# pickeasy/main.py
import logging
import sys
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError as SettingsError
from sqlalchemy.exc import SQLAlchemyError

from pickeasy import __version__
from pickeasy.config import Settings
from pickeasy.database import build_engine, build_session_factory, check_connection, init_db
from pickeasy.errors import NotFoundError, register_error_handlers
from pickeasy.routes import api_router

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _mount_frontend(app: FastAPI, static_dir: Path) -> None:
    """Serve the built single-page app; unknown paths fall back to index.html."""

    @app.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
    def frontend(full_path: str, request: Request):
        if request.method not in ("GET", "HEAD") or full_path == "api" or full_path.startswith("api/"):
            raise NotFoundError()
        root = static_dir.resolve()
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(str(candidate))
        index = root / "index.html"
        if not index.is_file():
            raise NotFoundError()
        return FileResponse(str(index))


def create_app(settings: Settings, engine=None) -> FastAPI:
    """Build the application around an explicit settings object.

    ``engine`` may be passed in by callers that already own one (tests, scripts);
    otherwise it is created from ``settings.DATABASE_URL``.
    """
    if engine is None:
        engine = build_engine(settings.DATABASE_URL)
    init_db(engine)

    app = FastAPI(title="PickEasy API", version=__version__)
    app.state.settings = settings
    app.state.engine = engine
    app.state.SessionLocal = build_session_factory(engine)

    register_error_handlers(app)

    # Uploads - make sure the directory exists
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    if not settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    if settings.is_production:
        _mount_frontend(app, Path(settings.STATIC_DIR))

    return app


def run() -> None:
    """Entry point: load settings, verify the database and serve."""
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()
    try:
        settings = Settings()
    except SettingsError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.critical("Invalid configuration, refusing to start: %s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        engine = build_engine(settings.DATABASE_URL)
        check_connection(engine)
        app = create_app(settings, engine=engine)
    except (SQLAlchemyError, ImportError) as exc:
        logger.critical("Database connection error: %s", exc)
        sys.exit(1)

    logger.info("Server running on port %s (%s)", settings.PORT, settings.ENVIRONMENT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
