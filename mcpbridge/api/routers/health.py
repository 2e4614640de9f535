"""Health check API router."""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request

from mcpbridge.infra.metrics import get_metrics_response

router = APIRouter()


@router.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Combined health check endpoint."""
    cfg = request.app.state.server_config
    return {
        "status": "healthy",
        "server_name": cfg.server.name,
        "version": cfg.server.version,
        "tools_count": len(cfg.tools),
        "prompts_count": len(cfg.prompts),
        "resources_count": len(cfg.resources),
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }


@router.get("/health/live", tags=["Health"])
async def liveness_probe():
    """Liveness probe - indicates if the process is running."""
    return {"status": "alive"}


@router.get("/metrics", tags=["Health"])
async def metrics(request: Request):
    """Prometheus metrics endpoint (runtime.metrics_enabled)."""
    if not request.app.state.server_config.runtime.metrics_enabled:
        raise HTTPException(status_code=404, detail="Not Found")
    return get_metrics_response()
