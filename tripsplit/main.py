import logging
import math
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tripsplit.core.config import settings
from tripsplit.core.errors import LedgerError
from tripsplit.core.logging import setup_logging
from tripsplit.db.mongo import connect_to_mongo, close_mongo_connection
from tripsplit.api.v1.api import api_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_to_mongo()
    yield
    await close_mongo_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Rejected Infinity/NaN inputs are echoed back as strings
    detail = jsonable_encoder(
        exc.errors(),
        custom_encoder={float: lambda v: v if math.isfinite(v) else str(v)}
    )
    return JSONResponse(status_code=422, content={"detail": detail})


@app.get("/")
async def root():
    return {"message": "Welcome to TripSplit API"}

app.include_router(api_router, prefix=settings.API_V1_STR)
