from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import httpx

from salon_admin.backend.providers.base import BaseAdapter, MalformedResponseError
from salon_admin.backend.providers.types import ExtractionPayload, ExtractionRequest

WIT_BASE_URL = "https://api.wit.ai"
WIT_API_VERSION = "20240101"
HF_INFERENCE_URL = "https://api-inference.huggingface.co/models"

INTENT_LABELS = [
	"add employee",
	"get revenue",
	"reassign appointments",
	"assign booking",
	"cancel booking",
	"general inquiry",
]

_WIT_ENTITY_FIELDS = {
	"names": ("wit/contact:contact", "contact:contact", "wit/person_name", "person"),
	"dates": ("wit/datetime:datetime", "wit/datetime", "date"),
	"services": ("service", "product"),
	"phones": ("wit/phone_number:phone_number", "wit/phone_number"),
	"emails": ("wit/email:email", "wit/email"),
}

_HF_ENTITY_GROUPS = {
	"names": {"PER", "PERSON"},
	"services": {"ORG", "MISC"},
	"dates": {"DATE", "TIME"},
}


def _unique(values: Iterable[str]) -> List[str]:
	return list(dict.fromkeys(v for v in values if v))


class WitExtractionAdapter(BaseAdapter):
	name = "wit"
	label = "Wit.ai"
	capability = "entity_extraction"
	min_confidence = 0.6

	def __init__(self, *, api_key: str, timeout_s: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
		super().__init__(api_key=api_key, timeout_s=timeout_s)
		self._transport = transport

	async def _call(self, request: ExtractionRequest) -> ExtractionPayload:
		async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
			response = await client.get(
				f"{WIT_BASE_URL}/message",
				params={"v": WIT_API_VERSION, "q": request.text},
				headers={"Authorization": f"Bearer {self._api_key}", "Accept": "application/json"},
			)
			response.raise_for_status()
			data = response.json()

		intents = data.get("intents") or []
		if not intents:
			raise MalformedResponseError("wit.ai returned no intents")
		top = intents[0]
		confidence = float(top.get("confidence") or 0.0)
		if confidence <= self.min_confidence:
			raise MalformedResponseError(f"wit.ai confidence {confidence:.2f} below threshold")
		raw_entities: Dict[str, Any] = data.get("entities") or {}
		entities: Dict[str, List[str]] = {}
		for field, keys in _WIT_ENTITY_FIELDS.items():
			values = [
				str(item.get("body", "")).strip()
				for key in keys
				for item in raw_entities.get(key, [])
				if isinstance(item, dict)
			]
			if values:
				entities[field] = _unique(values)
		return ExtractionPayload(intent=str(top.get("name", "")), confidence=confidence, entities=entities)


class HuggingFaceExtractionAdapter(BaseAdapter):
	name = "huggingface"
	label = "Hugging Face"
	capability = "entity_extraction"
	min_confidence = 0.5

	def __init__(
		self,
		*,
		api_key: str,
		classification_model: str,
		ner_model: str,
		timeout_s: float = 30.0,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	):
		super().__init__(api_key=api_key, timeout_s=timeout_s)
		self._classification_model = classification_model
		self._ner_model = ner_model
		self._transport = transport

	async def _call(self, request: ExtractionRequest) -> ExtractionPayload:
		headers = {"Authorization": f"Bearer {self._api_key}"}
		async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
			classified = await client.post(
				f"{HF_INFERENCE_URL}/{self._classification_model}",
				headers=headers,
				json={"inputs": request.text, "parameters": {"candidate_labels": INTENT_LABELS, "multi_label": False}},
			)
			classified.raise_for_status()
			classification = classified.json()

			recognised = await client.post(
				f"{HF_INFERENCE_URL}/{self._ner_model}",
				headers=headers,
				json={"inputs": request.text},
			)
			recognised.raise_for_status()
			tokens = recognised.json()

		labels = classification.get("labels") or []
		scores = classification.get("scores") or []
		if not labels or not scores:
			raise MalformedResponseError("hugging face returned no classification labels")
		confidence = float(scores[0])
		if confidence <= self.min_confidence:
			raise MalformedResponseError(f"hugging face confidence {confidence:.2f} below threshold")

		entities: Dict[str, List[str]] = {}
		if isinstance(tokens, list):
			for field, groups in _HF_ENTITY_GROUPS.items():
				values = [
					str(token.get("word", "")).replace("##", "").strip()
					for token in tokens
					if isinstance(token, dict) and token.get("entity_group") in groups
				]
				if values:
					entities[field] = _unique(values)
		return ExtractionPayload(intent=str(labels[0]), confidence=confidence, entities=entities)
