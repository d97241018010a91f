import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "hazardlog.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.database import Base, async_session_factory, engine
from app.routers import recommendations, reports
from app.services.llm_client import LLMClient
from app.services.recommendation.actor import ActorContext
from app.services.recommendation.analyzer import ReportAnalyzer
from app.services.recommendation.config import recommendation_config
from app.services.recommendation.record_source import SqlRecordSource
from app.services.recommendation.registry import ActorRegistry
from app.services.recommendation.state_store import (
    DatabaseStateStore,
    InMemoryStateStore,
    RedisStateStore,
    StateStore,
)

logger = logging.getLogger(__name__)


def build_state_store(config: Settings) -> StateStore:
    backend = config.state_backend.lower()
    if backend == "redis":
        return RedisStateStore(config.redis_url)
    if backend == "database":
        return DatabaseStateStore(async_session_factory)
    if backend == "memory":
        logger.warning("In-memory recommendation state: dismissals are lost on restart")
        return InMemoryStateStore()
    raise ValueError(f"Unknown state backend: {config.state_backend}")


def build_registry(config: Settings, state_store: StateStore) -> ActorRegistry:
    llm = LLMClient(
        openai_api_key=config.openai_api_key,
        anthropic_api_key=config.anthropic_api_key,
        openai_model=recommendation_config.llm.model_primary,
        anthropic_model=recommendation_config.llm.model_fallback,
    )
    if not llm.configured:
        logger.warning("No LLM API key configured — recommendations will be unavailable")

    context = ActorContext(
        record_source=SqlRecordSource(async_session_factory),
        analyzer=ReportAnalyzer(llm, recommendation_config, timeout=config.analyzer_timeout_seconds),
        state_store=state_store,
        config=recommendation_config,
    )
    return ActorRegistry(context)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    state_store = build_state_store(settings)
    app.state.recommendation_registry = build_registry(settings, state_store)
    logger.info(f"Recommendation service ready (state backend: {settings.state_backend})")

    yield

    # Shutdown
    await state_store.close()
    await engine.dispose()
    logger.info("Recommendation service stopped")


app = FastAPI(
    title="HazardLog",
    description="Safety inspection reports with AI writing recommendations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
app.include_router(recommendations.router, prefix="/api/recommendations", tags=["recommendations"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "hazardlog"}
