import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wordbook.api.api import api_router
from wordbook.core.config import settings
from wordbook.core.exceptions import WordbookError
from wordbook.db.init_db import init_db
from wordbook.schemas.response import StandardResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables before the first request."""
    logger.info("Creating database tables")
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set all CORS enabled origins
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(WordbookError)
async def wordbook_error_handler(request: Request, exc: WordbookError):
    body = StandardResponse(code=exc.status_code, message=exc.message, data=None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    body = StandardResponse(code=500, message="Internal server error", data=None)
    return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/health")
def health():
    return "ok"


app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == '__main__':
    uvicorn.run(
        'wordbook.main:app',
        host='0.0.0.0',
        port=settings.BACKEND_PORT,
        reload=True
    )
