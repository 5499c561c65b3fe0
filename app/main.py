from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import admin, auth, bookings, hall_images, halls, notifications, payments
from app.core.config import CORS_ORIGINS
from app.core.exceptions import register_exception_handlers

# ⭐ Import logging system
from app.core.logging_config import get_logger

# Registers every model on Base before the first request
from app.db import base  # noqa: F401

logger = get_logger()

app = FastAPI(
    title="Hall Booking API",
    version="1.0.0",
    description="API for Halls, Bookings, Payments & Notifications"
)

register_exception_handlers(app)


# ⭐ Request Logging Middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"REQUEST: {request.method} {request.url}")

    try:
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code} {request.url}")
        return response

    except Exception as e:
        logger.error(f"ERROR: {request.url} -> {str(e)}")
        raise e


# ⭐ CORS (cookies need explicit origins in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------- ROUTERS REGISTER ORDER MATTERS --------
app.include_router(auth.router)
app.include_router(halls.router)
app.include_router(hall_images.router)
app.include_router(bookings.router)
app.include_router(payments.router)
app.include_router(notifications.router)
app.include_router(admin.router)


@app.get("/", tags=["Root"])
def root():
    return {"message": "Backend running successfully"}
