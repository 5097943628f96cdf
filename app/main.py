from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.config import settings
from app.context import build_context
from app.routers import cards_router, health_router
from app.utils.logger import logger

ALLOWED_HEADERS = [
    "card-name", "card-id", "X-Amz-Date", "X-Api-Key", "X-Amz-Security-Token",
    "X-Requested-With", "X-Auth-Token", "Referer", "User-Agent", "Origin",
    "Content-Type", "Authorization", "Accept", "Access-Control-Allow-Methods",
    "Access-Control-Allow-Origin", "Access-Control-Allow-Headers",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the service context and load the signing key before serving"""
    # Startup logic: any failure here aborts startup
    context = getattr(app.state, "context", None)
    if context is None:
        logger.info("Initializing services...")
        context = build_context(settings)
        await context.issuer.initialize()
        app.state.context = context
        logger.info("Services initialized successfully")
    elif not context.issuer.is_ready:
        await context.issuer.initialize()

    yield  # Run application

    logger.info("Shutting down services...")

app = FastAPI(title="Card Template Service", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=ALLOWED_HEADERS,
)

app.include_router(cards_router.router)
app.include_router(health_router.router, prefix="/health", tags=["Health"])
