from __future__ import annotations

import uuid
from fastapi import FastAPI, Request

from async_calc.core.config import get_settings
from async_calc.core.errors import register_exception_handlers
from async_calc.core.logging import configure_logging, get_logger
from async_calc.routers import health, process
from async_calc.services.scheduler import create_scheduler

settings = get_settings()

configure_logging()
logger = get_logger()

app = FastAPI(
    title=settings.app_name,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)
app.state.scheduler = create_scheduler(settings)

register_exception_handlers(app)

app.include_router(process.router)
app.include_router(health.router)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    logger.info(
        "request",
        path=str(request.url.path),
        method=request.method,
        status_code=response.status_code,
        request_id=request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response


def run() -> None:
    import uvicorn

    host, port = settings.bind()
    logger.info("listening", listen_addr=settings.listen_addr)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
