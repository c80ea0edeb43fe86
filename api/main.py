from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from auth.service import TenantResolver
from core import settings, storage
from core.errors import NotFoundError, StorageError, ValidationError
from devices import router as devices_router
from locations import router as locations_router

logger = logging.getLogger(__name__)


class StripBasePathMiddleware:
    """
    Accept routes both with and without the configured BASE_PATH prefix
    (e.g. "/petone/devices" and "/devices").
    """

    def __init__(self, app, base_path: str) -> None:
        self.app = app
        self.base_path = base_path

    async def __call__(self, scope, receive, send):
        if self.base_path and scope["type"] == "http":
            path = scope["path"]
            if path == self.base_path or path.startswith(self.base_path + "/"):
                scope = dict(scope)
                scope["path"] = path[len(self.base_path):] or "/"
        await self.app(scope, receive, send)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Open the JSON store once per process.
        storage.init_store(settings.data_file())
        app.state.tenant_resolver = TenantResolver.from_settings()
        try:
            yield
        finally:
            storage.close_store()

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )
    app.add_middleware(StripBasePathMiddleware, base_path=settings.base_path())

    @app.exception_handler(ValidationError)
    async def _validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Bad request")
        return _error(400, f"{field}: {message}" if field else message)

    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(StorageError)
    async def _storage_error(_: Request, exc: StorageError) -> JSONResponse:
        return _error(500, str(exc))

    @app.exception_handler(HTTPException)
    async def _http_error(_: Request, exc: HTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    app.include_router(locations_router.router, tags=["locations"])
    app.include_router(devices_router.router, tags=["devices"])

    @app.get("/health")
    def health(request: Request) -> dict:
        resolver = request.app.state.tenant_resolver
        return {"status": "ok", "auth": "enabled" if resolver.verification_available else "disabled"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logger.info("Locations API listening on http://%s:%s%s", settings.host(), settings.port(), settings.base_path())
    uvicorn.run(app, host=settings.host(), port=settings.port())
