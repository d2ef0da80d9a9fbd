from __future__ import annotations

from fastapi import APIRouter, Request

from salon_admin.backend.response import success_response
from salon_admin.backend.schemas import ApiEnvelope
from salon_admin.backend.services import health_service


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/summary", response_model=ApiEnvelope)
def get_summary(request: Request):
	data = health_service.get_summary(request.app.state.runtime)
	return success_response(request=request, data=data)
