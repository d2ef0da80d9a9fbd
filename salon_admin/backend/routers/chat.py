from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from salon_admin.backend.response import success_response
from salon_admin.backend.schemas import AdminChatRequest, AdminChatResponse, AnalyzeRequest, ApiEnvelope
from salon_admin.backend.services import analysis_service
from salon_admin.backend.services.runtime import AssistantRuntime


router = APIRouter(prefix="/api/admin", tags=["admin-chat"])


def _runtime(request: Request) -> AssistantRuntime:
	return request.app.state.runtime


def _raise_service_error(exc: analysis_service.AssistantServiceError) -> None:
	raise HTTPException(
		status_code=exc.status_code,
		detail={"code": exc.code, "message": exc.message, "evidence": exc.evidence},
	) from exc


@router.post("/chat", response_model=AdminChatResponse, response_model_exclude_none=True)
async def chat(request: Request, payload: AdminChatRequest):
	result = await _runtime(request).chat.handle_message(payload.message, payload.conversation_id)
	return result.as_payload()


@router.get("/chat/{conversation_id}", response_model=ApiEnvelope)
def get_conversation(request: Request, conversation_id: str):
	history = _runtime(request).chat.history(conversation_id)
	if history is None:
		raise HTTPException(status_code=404, detail=f"Conversation '{conversation_id}' not found.")
	return success_response(request=request, data=history)


@router.delete("/chat/{conversation_id}", response_model=ApiEnvelope)
def clear_conversation(request: Request, conversation_id: str):
	removed = _runtime(request).chat.clear(conversation_id)
	return success_response(request=request, data={"conversationId": conversation_id, "cleared": removed})


@router.post("/analyze", response_model=ApiEnvelope)
async def analyze(request: Request, payload: AnalyzeRequest):
	try:
		result = await analysis_service.analyze_text(_runtime(request).orchestrator, payload.text)
	except analysis_service.AssistantServiceError as exc:
		_raise_service_error(exc)
	return success_response(request=request, data=result)


@router.post("/transcribe", response_model=ApiEnvelope)
async def transcribe(request: Request):
	audio = await request.body()
	content_type = request.headers.get("content-type", "audio/webm").split(";")[0].strip() or "audio/webm"
	try:
		result = await analysis_service.transcribe_audio(
			_runtime(request).orchestrator,
			audio,
			content_type=content_type,
			filename=request.headers.get("X-Filename", "recording.webm"),
		)
	except analysis_service.AssistantServiceError as exc:
		_raise_service_error(exc)
	return success_response(request=request, data=result)
