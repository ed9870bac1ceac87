# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from config import APP_HOST, APP_PORT, LOG_LEVEL
from database import client, db, ensure_indexes
from routes import admin, booking, cargo, complaint, season_pass, train, user
from utils.errors import AppError

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Railway Passenger Services API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user.router, prefix="/api/users")
app.include_router(train.router, prefix="/api/trains")
app.include_router(booking.router, prefix="/api/bookings")
app.include_router(cargo.router, prefix="/api/cargos")
app.include_router(season_pass.router, prefix="/api/season-passes")
app.include_router(complaint.router, prefix="/api/complaints")
app.include_router(admin.router, prefix="/api/admin")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/")
def root():
    return {"message": "Railway Passenger Services API is running"}


@app.on_event("startup")
def create_indexes():
    ensure_indexes(db)


@app.on_event("shutdown")
def shutdown_db_client():
    client.close()


if __name__ == "__main__":
    uvicorn.run("main:app", host=APP_HOST, port=APP_PORT, reload=True)
