import logging
import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import (
    ConflictError,
    FormforgeException,
    NotFoundError,
    ValidationException,
    VersionConflictError,
)
from .routes import brands, configs, sdk

logger = logging.getLogger(__name__)


def _status_for(exc: FormforgeException) -> int:
    if isinstance(exc, ValidationException):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (ConflictError, VersionConflictError)):
        return 409
    return 500


def create_app(config_obj=None) -> FastAPI:
    from ..config import Config
    from ..consts import ENV_CONFIG_FILE, ENV_DB_PATH
    from ..db import close_db, create_tables, init_db
    from ..registry import DefinitionRegistry
    from ..store import ConfigVersionStore

    if config_obj is None:
        config_file = os.environ.get(ENV_CONFIG_FILE)
        config_obj = Config.load_from_file(config_file) if config_file else Config()

    app = FastAPI(title="formforge API")

    app.state.config = config_obj
    app.state.registry = DefinitionRegistry()
    app.state.store = ConfigVersionStore.from_config(config_obj, app.state.registry)

    db_path = os.environ.get(ENV_DB_PATH, config_obj.database.path)
    init_db(db_path)
    create_tables()

    @app.exception_handler(FormforgeException)
    def handle_formforge_exception(request: Request, exc: FormforgeException):
        status = _status_for(exc)
        if status >= 500:
            logger.error(f"Unhandled error on {request.url.path}: {exc}")
        content = {"success": False, "error": str(exc)}
        field = getattr(exc, "field", None)
        if field:
            content["field"] = field
        version = getattr(exc, "version", None)
        if version is not None:
            content["version"] = version
        return JSONResponse(status_code=status, content=content)

    api_router = APIRouter(prefix="/api/v1")
    api_router.include_router(brands.router)
    api_router.include_router(configs.router)
    api_router.include_router(sdk.router)
    app.include_router(api_router)

    @app.on_event("shutdown")
    def shutdown_db():
        close_db()

    return app
