from __future__ import annotations

# File: apps/billdora/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .settings import settings
from .finance import router as finance_router
from .proposals import router as proposals_router
from .subscriptions import router as subscriptions_router


logging.basicConfig(
    level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Billdora API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(proposals_router)
app.include_router(subscriptions_router)
app.include_router(finance_router)


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "Billdora API", "version": app.version}


logger.info("Billdora API ready (frontend: %s)", settings.FRONTEND_BASE_URL)
