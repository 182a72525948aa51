import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from quiz_contest.api import admin, quiz
from quiz_contest.core.config import settings
from quiz_contest.core.db import create_schema, dispose_engine, wait_for_database


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Quiz Contest Backend",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz.router)
app.include_router(admin.router)
app.include_router(admin.protected)


@app.exception_handler(SQLAlchemyError)
@app.exception_handler(OSError)
async def store_error_handler(request: Request, exc: Exception):
    # asyncpg raises bare OSErrors (connection refused, reset) that SQLAlchemy does not wrap
    logger.error("Data store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=503, content={"detail": "Data store unavailable"})


@app.get("/")
async def root():
    return {"message": "Quiz contest is running"}


@app.on_event("startup")
async def startup():
    await wait_for_database()
    if settings.AUTO_CREATE_SCHEMA:
        await create_schema()


@app.on_event("shutdown")
async def shutdown():
    await dispose_engine()
