from __future__ import annotations

from fastapi import APIRouter, Request

from salon_admin.backend.response import success_response
from salon_admin.backend.schemas import ApiEnvelope


router = APIRouter(prefix="/api/admin/providers", tags=["providers"])


@router.get("", response_model=ApiEnvelope)
def list_providers(request: Request):
	orchestrator = request.app.state.runtime.orchestrator
	return success_response(request=request, data={"providers": orchestrator.status_by_capability()})


@router.post("/reset", response_model=ApiEnvelope)
def reset_providers(request: Request):
	orchestrator = request.app.state.runtime.orchestrator
	orchestrator.reset()
	return success_response(request=request, data={"providers": orchestrator.status_by_capability()})
