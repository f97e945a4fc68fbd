import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cards_api.config import settings
from cards_api.database import engine
from cards_api.exceptions import CardsAPIException, cards_api_exception_handler
from cards_api.middleware import TimingMiddleware
from cards_api.routers import cards

VERSION = "1.0.0"

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Cards API %s starting (env=%s, bucket=%s)", VERSION, settings.APP_ENV, settings.S3_BUCKET
    )
    yield
    await engine.dispose()
    logger.info("Cards API stopped")

app = FastAPI(
    title="Cards API",
    description="CRUD API for cards with a single attached file in object storage",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Errors
app.add_exception_handler(CardsAPIException, cards_api_exception_handler)

# Routers
app.include_router(cards.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}
