"""PermitFlow ASGI app: environment, logging, middleware and the v1 routers."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from permitflow.api.v1 import router as v1_router
from permitflow.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
logger = logging.getLogger("permitflow")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info(
        "PermitFlow starting",
        extra={
            "app_env": settings.APP_ENV,
            "timezone": settings.APP_TIMEZONE,
            "push_enabled": settings.PUSH_ENABLED,
            "allow_redecision": settings.ALLOW_REDECISION,
        },
    )
    yield


app = FastAPI(
    title="PermitFlow API",
    description="Vehicle-use permits: employee requests, HR decisions, admin monitoring and reports.",
    version="0.1.0",
    lifespan=lifespan,
)

# Browser clients are only allowed from anywhere in dev.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    return {"service": "PermitFlow API", "docs": "/docs", "api": settings.API_V1_PREFIX}
