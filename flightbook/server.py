"""
FlightBook API server
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv
import os
import logging

from .database import close_db, init_db
from .redis_service import redis_service
from .api.routes import auth, bookings, flights, health, payment, seats, sessions, users

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="FlightBook API", version=health.API_VERSION)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.getenv('CORS_ORIGINS', '*').split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Every error body carries a top-level "error" field."""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


def _validation_message(error) -> str:
    message = error.get("msg", "Invalid value")
    # pydantic prefixes messages raised from custom validators
    return message.removeprefix("Value error, ")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = list(error.get("loc", ()))
        if location and location[0] == "body":
            location = location[1:]
        details.append({
            "field": ".".join(str(part) for part in location),
            "message": _validation_message(error),
        })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details},
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup():
    await init_db()
    await redis_service.connect()
    logger.info("🚀 FlightBook API started")


@app.on_event("shutdown")
async def shutdown():
    await redis_service.disconnect()
    await close_db()
    logger.info("Database and Redis disconnected")


app.include_router(health.router)
app.include_router(flights.router)
app.include_router(seats.router)
app.include_router(bookings.router)
app.include_router(payment.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(sessions.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("flightbook.server:app", host="0.0.0.0", port=8001, reload=True)
