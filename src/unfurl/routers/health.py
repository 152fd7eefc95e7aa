from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    credential_configured: bool


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck(request: Request):
    # The process stays up without a token; embeds fail until one is set.
    settings = getattr(request.app.state, "settings", None)
    configured = settings is not None and settings.has_credential
    return {"status": "ok", "credential_configured": configured}
