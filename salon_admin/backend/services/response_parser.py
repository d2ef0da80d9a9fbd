"""Lenient extraction of the structured action from free-form model output.

Providers are asked for a JSON object but routinely wrap it in prose or code
fences. The strategy here is deliberately narrow: find the first balanced
``{...}`` span (string-literal aware) and ``json.loads`` only that span.
Anything else degrades to a ``CHAT`` turn carrying the raw text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, Optional

from salon_admin.backend.services.actions import ActionKind, normalize_entities, normalize_intent

_REPLY_KEYS = ("response", "reply", "message")


@dataclass
class ParsedReply:
	intent: ActionKind
	entities: Dict[str, str] = field(default_factory=dict)
	reply: str = ""
	structured: bool = False


def first_balanced_object(text: str) -> Optional[str]:
	start = text.find("{")
	if start == -1:
		return None
	depth = 0
	in_string = False
	escaped = False
	for index in range(start, len(text)):
		char = text[index]
		if in_string:
			if escaped:
				escaped = False
			elif char == "\\":
				escaped = True
			elif char == '"':
				in_string = False
			continue
		if char == '"':
			in_string = True
		elif char == "{":
			depth += 1
		elif char == "}":
			depth -= 1
			if depth == 0:
				return text[start : index + 1]
	return None


def parse_reply(raw: str) -> ParsedReply:
	text = (raw or "").strip()
	fallback = ParsedReply(intent="CHAT", reply=text)
	candidate = first_balanced_object(text)
	if candidate is None:
		return fallback
	try:
		payload = json.loads(candidate)
	except json.JSONDecodeError:
		return fallback
	if not isinstance(payload, dict):
		return fallback

	reply = ""
	for key in _REPLY_KEYS:
		value = payload.get(key)
		if isinstance(value, str) and value.strip():
			reply = value.strip()
			break
	return ParsedReply(
		intent=normalize_intent(payload.get("intent")),
		entities=normalize_entities(payload.get("entities")),
		reply=reply,
		structured=True,
	)
