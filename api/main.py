import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers

from core import db
from core.config import Settings, load_settings
from registrations import repository as registration_repository
from registrations import responses as registration_responses
from registrations import router as registrations_router

logger = logging.getLogger(__name__)


class BarePreflightCORSMiddleware(CORSMiddleware):
    """
    CORS middleware whose preflight replies are always a bare 200.

    Allow-* headers are still computed by Starlette; only the status and the
    plain-text body of its preflight response are dropped.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        checked = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in checked.headers.items()
            if key.lower() not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


def create_app(
    settings: Settings | None = None,
    store_factory: registration_repository.StoreFactory | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    uses_database = store_factory is None

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        # Initialize the DB pool once per process.
        if uses_database:
            await db.init_pool(settings)
            logger.info("db_pool_ready min_size=%s max_size=%s", settings.pool_min_size, settings.pool_max_size)
        try:
            yield
        finally:
            if uses_database:
                await db.close_pool()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.store_factory = store_factory or registration_repository.postgres_store

    # Any origin may call the registration endpoint from the browser.
    app.add_middleware(
        BarePreflightCORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["POST", "GET", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    registration_responses.install_error_handlers(app)
    app.include_router(
        registrations_router.router,
        prefix=settings.registration_path,
        tags=["registrations"],
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
