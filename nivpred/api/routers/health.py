"""Health check endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from ...core.scores import load_policy
from ..core.config import get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/")
def healthcheck() -> dict[str, str]:
    policy = load_policy(get_settings().policy_id)
    return {
        "status": "ok",
        "policy": policy.id,
        "policy_version": policy.version,
    }
