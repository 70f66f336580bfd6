"""Health, status, bot configuration and theme endpoints."""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from mentat.constants import THEME_COLORS
from mentat.core.framework import BotFramework
from mentat.dependencies import get_framework
from mentat.models.requests import BotConfigUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
async def health():
    return {"status": "ok", "timestamp": int(time.time() * 1000)}


@router.get("/status")
async def status(framework: BotFramework = Depends(get_framework)):
    """Connection state and registry counters."""
    return framework.status()


@router.get("/config")
async def get_config(framework: BotFramework = Depends(get_framework)):
    """Top-level bot configuration (the token is never included)."""
    return framework.config_service.as_dict()


@router.post("/config")
async def update_config(body: BotConfigUpdate, framework: BotFramework = Depends(get_framework)):
    """Merge top-level configuration values and persist them.

    A new prefix applies to the next message; a new port applies on restart.
    """
    values = body.model_dump(exclude_unset=True)
    values.pop("plugins", None)

    port = values.get("port")
    if port is not None and not 1 <= port <= 65535:
        raise HTTPException(status_code=400, detail="Invalid port number")
    if "theme" in values and values["theme"] not in THEME_COLORS:
        raise HTTPException(status_code=400, detail=f"Unknown theme: {values['theme']}")

    config = framework.config_service.update(values)
    return {"success": True, "config": config}


@router.get("/themes")
async def themes():
    return list(THEME_COLORS)
