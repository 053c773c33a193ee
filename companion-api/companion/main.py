import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
from fastapi.middleware.cors import CORSMiddleware

from companion import models  # noqa: F401  (registers tables on Base.metadata)
from companion.core.config import settings
from companion.core.db import engine, Base
from companion.routers import auth, builds, chat, items, users
from companion.services.assistant import AnswerGenerator
from companion.services.knowledge import KnowledgeBase


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events"""
    # Startup
    Base.metadata.create_all(bind=engine)
    logger.info("[Startup] Database tables ready")

    yield

    # Shutdown
    engine.dispose()


app = FastAPI(
    title="Vault Companion API",
    version="0.1",
    root_path=settings.ROOT_PATH,
    lifespan=lifespan,
)

# Snapshot loads lazily on first chat message
app.state.knowledge_base = KnowledgeBase()
app.state.answer_generator = AnswerGenerator()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["system"])
def health():
    return {"ok": True}


@app.get("/", tags=["system"])
def root():
    return {"service": "vault-companion-api"}


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(builds.router)
app.include_router(items.router)
app.include_router(chat.router)
