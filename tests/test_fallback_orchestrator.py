from unittest import IsolatedAsyncioTestCase

from salon_admin.backend.providers.types import ExtractionRequest
from salon_admin.backend.services.fallback_orchestrator import ChainFailure, FallbackOrchestrator
from salon_admin.backend.services.provider_status_service import InMemoryProviderStatusStore
from tests.support import ScriptedAdapter, failure


def _chain(*adapters):
	return {"conversation": list(adapters)}


class FallbackOrchestratorTests(IsolatedAsyncioTestCase):
	def setUp(self) -> None:
		self.status = InMemoryProviderStatusStore()

	async def test_first_success_wins_and_later_adapters_are_not_called(self) -> None:
		groq = ScriptedAdapter("groq", "conversation", [failure("groq", "transient_network")])
		gemini = ScriptedAdapter("gemini", "conversation", ["from gemini"])
		openai_gpt = ScriptedAdapter("openai-gpt", "conversation", ["from openai"])
		orchestrator = FallbackOrchestrator(_chain(groq, gemini, openai_gpt), self.status)

		result = await orchestrator.run("conversation", "hello")

		self.assertTrue(result.ok)
		self.assertEqual(result.provider, "gemini")
		self.assertEqual(result.payload, "from gemini")
		self.assertEqual(len(groq.requests), 1)
		self.assertEqual(len(gemini.requests), 1)
		self.assertEqual(openai_gpt.requests, [])

	async def test_every_failure_prefix_returns_the_first_succeeding_provider(self) -> None:
		names = ["a", "b", "c", "d"]
		for failing in range(len(names)):
			status = InMemoryProviderStatusStore()
			adapters = [
				ScriptedAdapter(
					name,
					"conversation",
					[failure(name, "malformed_response")] if index < failing else [f"payload-{name}"],
				)
				for index, name in enumerate(names)
			]
			orchestrator = FallbackOrchestrator(_chain(*adapters), status)
			result = await orchestrator.run("conversation", "hi")
			self.assertEqual(result.provider, names[failing])
			self.assertEqual(result.payload, f"payload-{names[failing]}")

	async def test_quota_failure_disables_provider_across_sessions(self) -> None:
		groq = ScriptedAdapter("groq", "conversation", [failure("groq", "quota_exceeded", "429 rate limit")])
		gemini = ScriptedAdapter("gemini", "conversation", ["ok"])
		orchestrator = FallbackOrchestrator(_chain(groq, gemini), self.status)

		await orchestrator.run("conversation", "first session")
		await orchestrator.run("conversation", "second session")
		await orchestrator.run("conversation", "third session")

		self.assertEqual(len(groq.requests), 1)
		self.assertEqual(len(gemini.requests), 3)
		self.assertFalse(self.status.is_available("groq"))
		self.assertEqual(self.status.get("groq").last_failure_kind, "quota_exceeded")

	async def test_transient_and_malformed_failures_keep_provider_available(self) -> None:
		groq = ScriptedAdapter(
			"groq",
			"conversation",
			[failure("groq", "transient_network"), failure("groq", "malformed_response"), "recovered"],
		)
		gemini = ScriptedAdapter("gemini", "conversation", ["fallback"])
		orchestrator = FallbackOrchestrator(_chain(groq, gemini), self.status)

		first = await orchestrator.run("conversation", "1")
		second = await orchestrator.run("conversation", "2")
		third = await orchestrator.run("conversation", "3")

		self.assertEqual([first.provider, second.provider, third.provider], ["gemini", "gemini", "groq"])
		self.assertTrue(self.status.is_available("groq"))
		self.assertIsNone(self.status.get("groq").last_error)

	async def test_all_providers_failing_returns_aggregated_failure(self) -> None:
		adapters = [
			ScriptedAdapter(name, "conversation", [failure(name, "quota_exceeded", f"{name} quota")])
			for name in ("groq", "gemini", "openai-gpt")
		]
		orchestrator = FallbackOrchestrator(_chain(*adapters), self.status)

		result = await orchestrator.run("conversation", "hello")

		self.assertIsInstance(result, ChainFailure)
		self.assertFalse(result.ok)
		self.assertEqual([item["provider"] for item in result.diagnostics()], ["groq", "gemini", "openai-gpt"])
		description = result.describe()
		for name in ("groq quota", "gemini quota", "openai-gpt quota"):
			self.assertIn(name, description)
		for name in ("groq", "gemini", "openai-gpt"):
			self.assertFalse(self.status.is_available(name))

		again = await orchestrator.run("conversation", "hello again")
		self.assertIsInstance(again, ChainFailure)
		self.assertTrue(all(len(adapter.requests) == 1 for adapter in adapters))
		self.assertTrue(all("skipped" in item["message"] for item in again.diagnostics()))

	async def test_unconfigured_provider_is_unavailable_from_start(self) -> None:
		groq = ScriptedAdapter("groq", "conversation", ["never"], configured=False)
		gemini = ScriptedAdapter("gemini", "conversation", ["ok"])
		orchestrator = FallbackOrchestrator(_chain(groq, gemini), self.status)

		self.assertFalse(self.status.is_available("groq"))
		self.assertEqual(self.status.get("groq").last_failure_kind, "auth_error")
		result = await orchestrator.run("conversation", "hello")
		self.assertEqual(result.provider, "gemini")
		self.assertEqual(groq.requests, [])

	async def test_reset_restores_providers_but_not_missing_keys(self) -> None:
		groq = ScriptedAdapter("groq", "conversation", [failure("groq", "auth_error"), "back"])
		gemini = ScriptedAdapter("gemini", "conversation", ["ok"], configured=False)
		openai_gpt = ScriptedAdapter("openai-gpt", "conversation", ["ok"])
		orchestrator = FallbackOrchestrator(_chain(groq, gemini, openai_gpt), self.status)

		await orchestrator.run("conversation", "hello")
		self.assertFalse(self.status.is_available("groq"))

		orchestrator.reset()

		self.assertTrue(self.status.is_available("groq"))
		self.assertFalse(self.status.is_available("gemini"))
		result = await orchestrator.run("conversation", "hello")
		self.assertEqual(result.provider, "groq")

	async def test_capabilities_are_independent(self) -> None:
		wit = ScriptedAdapter("wit", "entity_extraction", [failure("wit", "quota_exceeded")])
		huggingface = ScriptedAdapter("huggingface", "entity_extraction", ["extracted"])
		groq = ScriptedAdapter("groq", "conversation", ["chat"])
		orchestrator = FallbackOrchestrator(
			{"conversation": [groq], "entity_extraction": [wit, huggingface]},
			self.status,
		)

		extracted = await orchestrator.run("entity_extraction", ExtractionRequest(text="cancel #123"))
		chatted = await orchestrator.run("conversation", "hi")

		self.assertEqual(extracted.provider, "huggingface")
		self.assertEqual(chatted.provider, "groq")
		grouped = orchestrator.status_by_capability()
		self.assertEqual([item["name"] for item in grouped["entity_extraction"]], ["wit", "huggingface"])
		self.assertEqual(grouped["transcription"], [])
		self.assertFalse(grouped["entity_extraction"][0]["available"])
