from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiError(BaseModel):
	model_config = ConfigDict(extra="forbid")

	code: str
	message: str
	evidence: List[str] = Field(default_factory=list)


class ApiEnvelope(BaseModel):
	model_config = ConfigDict(extra="allow")

	ok: bool
	generated_at: str
	request_id: Optional[str] = None
	data: Optional[Dict[str, Any]] = None
	error: Optional[ApiError] = None


class AdminChatRequest(BaseModel):
	model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, populate_by_name=True)

	message: str = Field(..., min_length=1, description="Admin message in natural language.")
	conversation_id: Optional[str] = Field(
		default=None,
		alias="conversationId",
		description="Conversation to continue; the shared default session when omitted.",
	)


class ChatActionData(BaseModel):
	model_config = ConfigDict(extra="forbid")

	type: str
	entities: Dict[str, str] = Field(default_factory=dict)
	requiresFollowUp: bool = False
	missing: List[str] = Field(default_factory=list)


class ActionResultData(BaseModel):
	model_config = ConfigDict(extra="forbid")

	success: bool
	type: str
	data: Dict[str, Any] = Field(default_factory=dict)


class ProviderDiagnostic(BaseModel):
	model_config = ConfigDict(extra="forbid")

	provider: str
	kind: str
	message: str


class AdminChatResponse(BaseModel):
	model_config = ConfigDict(extra="forbid")

	conversationId: str
	message: str
	action: ChatActionData
	actionResult: Optional[ActionResultData] = None
	followUpQuestions: List[str] = Field(default_factory=list)
	requiresFollowUp: bool = False
	provider: Optional[str] = None
	diagnostics: List[ProviderDiagnostic] = Field(default_factory=list)


class AnalyzeRequest(BaseModel):
	model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

	text: str = Field(..., min_length=1, description="Text to classify with the extraction providers.")
