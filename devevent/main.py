import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devevent.core.config import LOG_LEVEL, get_cors_origins
from devevent.core.exceptions import RecordValidationError
from devevent.database.db import Base, engine
from devevent.routes import bookings, events, pages

logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="DevEvent")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create all tables (in production, use migrations such as Alembic)
Base.metadata.create_all(bind=engine)


@app.exception_handler(RecordValidationError)
async def record_validation_error_handler(request: Request, exc: RecordValidationError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "field": exc.field})


# Include the routers
app.include_router(events.router)
app.include_router(bookings.router)
app.include_router(pages.router)
