import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parlour.api.v1.attendance.router import router as attendance_router
from parlour.api.v1.attendance.service import AttendanceService
from parlour.api.v1.auth.router import router as auth_router
from parlour.api.v1.employees.router import router as employees_router
from parlour.api.v1.tasks.router import router as tasks_router
from parlour.core.config import settings
from parlour.core.schemas import HealthResponse
from parlour.db.session import init_db
from parlour.realtime.broadcaster import RealtimeBroadcaster
from parlour.realtime.router import router as realtime_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database ready; realtime channel at /ws")
    yield


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Parlour API", lifespan=lifespan)

    # CORS: allow the dashboard to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # One broadcaster per app, handed to the punch handler explicitly
    broadcaster = RealtimeBroadcaster(send_timeout=settings.broadcast_send_timeout_seconds)
    app.state.broadcaster = broadcaster
    app.state.attendance_service = AttendanceService(broadcaster)

    # Routers
    app.include_router(auth_router)
    app.include_router(employees_router)
    app.include_router(tasks_router)
    app.include_router(attendance_router)
    app.include_router(realtime_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="OK", message="Parlour API is running")

    return app


app = create_app()
