import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from core.exceptions import PersistenceError
from core.metrics import metrics
from database.db import SessionLocal, dispose_db, init_db
from repositories.attendance import AttendanceRepository
from repositories.teachers import TeacherRepository
from services.attendance_service import AttendanceService
from services.teacher_service import TeacherService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# quiet down library debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# middlewares
from middlewares.timing import MetricsMiddleware  # noqa: E402
from middlewares.error_handler import add_error_handlers  # noqa: E402

# routers
from routers import attendance, teachers  # noqa: E402


def _seed_gauges() -> None:
    db = SessionLocal()
    try:
        TeacherService(TeacherRepository(db), metrics).sync_total()
        AttendanceService(AttendanceRepository(db), TeacherRepository(db), metrics).refresh_today_gauge()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Starting School Teacher Management API...")
    try:
        init_db()
        _seed_gauges()
    except (SQLAlchemyError, PersistenceError):
        # unreachable database: abort start-up
        logger.critical("Database connection failed", exc_info=True)
        raise
    logger.info("Database connected successfully")

    yield

    logger.info("Shutting down, closing database connections")
    dispose_db()


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/swagger",
    openapi_url="/swagger/doc.json",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Authorization"],
)

# request metrics + X-Latency-Ms header
app.add_middleware(MetricsMiddleware, metrics=metrics)

# consistent JSON error bodies
add_error_handlers(app)

# /api/v1 routers
app.include_router(teachers.router,   prefix="/api/v1")
app.include_router(attendance.router, prefix="/api/v1")


# Prometheus exposition
@app.get("/metrics", include_in_schema=False)
def prometheus_metrics():
    return Response(content=metrics.render(), media_type=metrics.content_type)


@app.get("/health", tags=["health"])
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.get("/", include_in_schema=False)
def root():
    return {"message": "School Teacher Management API", "docs": "/swagger"}


if __name__ == "__main__":
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
