from unittest import TestCase
from unittest.mock import patch

from salon_admin.backend.services import chat_session_service
from salon_admin.backend.services.chat_session_service import InMemorySessionStore


class ConversationSessionTests(TestCase):
	def setUp(self) -> None:
		self.store = InMemorySessionStore()
		self.session = self.store.ensure("s-1")

	def test_new_session_awaits_intent(self) -> None:
		self.assertEqual(self.session.state, "awaiting_intent")
		self.assertEqual(self.session.missing(), [])
		self.assertFalse(self.session.is_complete())

	def test_start_pending_moves_to_collecting(self) -> None:
		self.session.start_pending("ADD_EMPLOYEE", {"name": "Rahul"})
		self.assertEqual(self.session.state, "collecting")
		self.assertEqual(self.session.pending.entities, {"name": "Rahul"})
		self.assertEqual(self.session.missing(), ["role", "phone", "email"])

	def test_merge_never_clears_collected_fields(self) -> None:
		self.session.start_pending("ADD_EMPLOYEE", {"name": "Rahul", "role": "Stylist"})
		merged = self.session.merge_entities({"name": "", "role": None, "phone": "  ", "email": "rahul@x.com"})
		self.assertEqual(merged, {"name": "Rahul", "role": "Stylist", "email": "rahul@x.com"})

	def test_merge_is_idempotent(self) -> None:
		self.session.start_pending("REASSIGN_APPOINTMENTS", {})
		update = {"employeeName": "Priya", "date": "2025-03-16"}
		first = self.session.merge_entities(update)
		second = self.session.merge_entities(update)
		self.assertEqual(first, second)
		self.assertTrue(self.session.is_complete())

	def test_merge_without_pending_action_is_a_no_op(self) -> None:
		self.assertEqual(self.session.merge_entities({"name": "Rahul"}), {})
		self.assertIsNone(self.session.pending)

	def test_clear_pending_returns_to_awaiting_intent(self) -> None:
		self.session.start_pending("CANCEL_BOOKING", {"bookingId": "abc"})
		self.session.clear_pending()
		self.assertEqual(self.session.state, "awaiting_intent")

	def test_history_is_capped_and_text_kept_as_sent(self) -> None:
		store = InMemorySessionStore(max_turns=10)
		session = store.ensure("capped")
		for index in range(15):
			session.append_message("user", f"  message   {index} ")
		session.append_message("assistant", "   ")
		self.assertEqual(len(session.turns), 10)
		self.assertEqual(session.turns[0].text, "message   5")
		self.assertEqual([turn.text for turn in session.recent(2)], ["message   13", "message   14"])
		self.assertEqual(session.recent(0), [])

	def test_multiline_messages_keep_their_line_breaks(self) -> None:
		self.session.append_message("user", "  line one\n  line two\n")
		self.assertEqual(self.session.turns[-1].text, "line one\n  line two")

	def test_as_dict_reports_pending_action(self) -> None:
		self.session.start_pending("ASSIGN_BOOKING", {"bookingId": "B1"})
		self.session.append_message("user", "assign B1")
		payload = self.session.as_dict()
		self.assertEqual(payload["conversationId"], "s-1")
		self.assertEqual(payload["state"], "collecting")
		self.assertEqual(payload["pendingAction"]["missing"], ["stylistName"])
		self.assertEqual(payload["messages"][0]["role"], "user")


class InMemorySessionStoreTests(TestCase):
	def test_ensure_returns_same_session(self) -> None:
		store = InMemorySessionStore()
		self.assertIs(store.ensure("a"), store.ensure("a"))
		self.assertIsNot(store.ensure("a"), store.ensure("b"))

	def test_delete(self) -> None:
		store = InMemorySessionStore()
		store.ensure("a")
		self.assertTrue(store.delete("a"))
		self.assertFalse(store.delete("a"))
		self.assertIsNone(store.get("a"))

	def test_sessions_never_expire_by_default(self) -> None:
		store = InMemorySessionStore()
		session = store.ensure("old")
		session.updated_at = "2000-01-01T00:00:00Z"
		self.assertIs(store.get("old"), session)

	def test_idle_sessions_expire_with_ttl(self) -> None:
		store = InMemorySessionStore(ttl_seconds=60)
		session = store.ensure("old")
		session.updated_at = "2000-01-01T00:00:00Z"
		store.ensure("fresh")
		self.assertIsNone(store.get("old"))
		self.assertIsNotNone(store.get("fresh"))

	def test_updated_at_uses_utc_iso(self) -> None:
		with patch.object(chat_session_service, "_now_iso", return_value="2025-03-15T10:00:00Z"):
			session = InMemorySessionStore().ensure("t")
		self.assertEqual(session.updated_at, "2025-03-15T10:00:00Z")
