import logging
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.error import ClientError
from src.api.routes import credits, reports

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.ENABLE_SENTRY:
        import sentry_sdk

        sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
        logger.info("Sentry enabled")

    app = FastAPI(
        title="Platform Credit Ledger",
        description="Platform credit ledger and financial reporting API",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            start_time = time.time()
            response = await call_next(request)
            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms}ms)"
            )
            return response

    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} - {exc.error.reason}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error.model_dump(exclude_none=True)},
        )

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    app.include_router(credits.router)
    app.include_router(reports.router)

    return app
