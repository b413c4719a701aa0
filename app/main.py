import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.db.session import engine, Base, SessionLocal
from app.db.models.order import Order # noqa
from app.db.models.site_content import SiteContent # noqa
from .routers import order, content, auth
from app.core.config import settings
from app.services.content_service import ContentStore
from app.services.notifier import build_notifier

# Configure Logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - [%(levelname)s] - %(name)s - %(message)s",
    handlers=[
        logging.FileHandler("app.log"),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)


# Lifespan events
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🍞 Bakery API starting up...")

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("SQLite tables ensured.")

    async with SessionLocal() as db:
        await ContentStore(db).seed_defaults()

    app.state.notifier = build_notifier(settings)
    logger.info(f"Order notifier: {app.state.notifier.name}")

    logger.info("FastAPI startup complete.")
    yield

    await engine.dispose()
    logger.info("Resources cleaned up. Application shutting down.")


# FastAPI App
app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

cors_origins = [
    "http://localhost:5500",
    "http://127.0.0.1:5500",
    "http://localhost:3000",
    "http://localhost:5000",
]
if settings.FRONTEND_URL:
    cors_origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.get("/")
def read_root():
    logger.info("Root endpoint accessed.")
    return {"message": f"Welcome to {settings.BUSINESS_NAME}, fresh hot bread all day!"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "message": f"{settings.APP_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "features": {
            "orders": True,
            "emailNotifications": settings.email_enabled,
        },
    }


# Routers
app.include_router(order.router, prefix="/orders", tags=["orders"])
app.include_router(content.router, prefix="/content", tags=["content"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])
