import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from barberin.core import responses
from barberin.core.clock import utcnow
from barberin.core.config import ALLOWED_ORIGINS, LOG_LEVEL
from barberin.core.errors import AppError, AuthError, ValidationError
from barberin.database import create_db_and_tables
from barberin.routers import appointments, auth, barbers, barbershops, reviews, services, users

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("BARBERIN API starting up...")
    try:
        create_db_and_tables()
    except Exception:
        # sem banco não tem API: derruba o processo
        logger.exception("Failed to initialize database")
        raise
    yield
    logger.info("BARBERIN API shutting down...")


app = FastAPI(title="BARBERIN API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================
# ERROS -> ENVELOPE
# =========================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, ValidationError):
        return responses.validation_error(exc.errors, exc.message)

    response = responses.error(exc.message, exc.status_code)
    if isinstance(exc, AuthError):
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        errors.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return responses.validation_error(errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return responses.error(
            "Endpoint not found",
            404,
            path=request.url.path,
            method=request.method,
        )
    return responses.error(str(exc.detail), exc.status_code)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return responses.error(str(exc) or "Internal server error", 500)


app.include_router(users.router)
app.include_router(barbershops.router)
app.include_router(barbers.router)
app.include_router(services.router)
app.include_router(appointments.router)
app.include_router(reviews.router)
app.include_router(auth.router)


@app.get("/")
def root():
    return responses.success(message="BARBERIN API running")


@app.get("/health")
def health():
    return responses.success(
        {
            "status": "OK",
            "timestamp": utcnow().isoformat().replace("+00:00", "Z"),
            "service": "BARBERIN API",
        },
        "Service healthy",
    )
