#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for the vocabulary annotator.

Usage:
    uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

import time

from fastapi import FastAPI

from config.logging_config import get_logger
from config.settings import settings
from api.vocabulary_router import router as vocabulary_router
from core.vocabulary.service import build_service

logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Vocabulary Annotator",
    description="Auto-link glossary words inside Portable Text content",
    version=VERSION,
)

app.state.vocabulary_service = build_service(settings)
app.include_router(vocabulary_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "version": VERSION,
        "timestamp": time.time()
    }
