import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

import models  # noqa: F401  (registers Organization, User, Shift tables with SQLModel)
from api.admin_analytics_routes import router as admin_analytics_router
from api.admin_organization_routes import router as admin_organization_router
from api.organization_routes import router as organization_router
from api.time_routes import router as time_router
from api.user_dashboard_routes import router as user_dashboard_router
from api.user_routes import router as user_router
from core.config import LOG_LEVEL, allowed_origins
from core.exceptions import ShiftTrackingError
from db.session import engine

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# This file is the control center of the whole application

allowed_origins_list = allowed_origins()
logger.info("CORS: Allowing origins: %s", allowed_origins_list)


# When We Start, Create the DB Tables (and the active-shift index) if they don't exist
@asynccontextmanager
async def lifespan(app: FastAPI):
    SQLModel.metadata.create_all(engine)
    yield


# Starts Fast API Up; Init
app = FastAPI(title="Care Shift Tracker", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every domain error becomes a structured {success: false, message} response
@app.exception_handler(ShiftTrackingError)
async def shift_tracking_error_handler(request: Request, exc: ShiftTrackingError):
    logger.info(
        "%s %s -> %s: %s", request.method, request.url.path, exc.error_type, exc.message
    )
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_response(), headers=exc.headers
    )


# Connects Routes From Time_Routes (clock-in / out) to main app
app.include_router(time_router, prefix="/time", tags=["Time"])
app.include_router(user_dashboard_router, prefix="/user-dashboard-requests", tags=["User", "Dashboard"])
app.include_router(user_router, prefix="/users", tags=["User"])
app.include_router(organization_router, prefix="/organizations", tags=["Organizations", "Geofence"])
app.include_router(admin_organization_router, prefix="/admin/organizations", tags=["Admin", "Organizations"])
app.include_router(admin_analytics_router, prefix="/admin/analytics", tags=["Admin", "Shift Analytics"])
