from unittest import TestCase

from salon_admin.backend.services.response_parser import first_balanced_object, parse_reply


class ResponseParserTests(TestCase):
	def test_object_embedded_in_prose_is_extracted(self) -> None:
		parsed = parse_reply('Sure! {"intent":"CHAT","entities":{},"response":"Hi"} thanks')
		self.assertTrue(parsed.structured)
		self.assertEqual(parsed.intent, "CHAT")
		self.assertEqual(parsed.reply, "Hi")
		self.assertEqual(parsed.entities, {})

	def test_code_fenced_json_is_parsed(self) -> None:
		raw = '```json\n{"intent": "GET_REVENUE", "entities": {"date": "2025-03-14"}, "response": "Checking."}\n```'
		parsed = parse_reply(raw)
		self.assertEqual(parsed.intent, "GET_REVENUE")
		self.assertEqual(parsed.entities, {"date": "2025-03-14"})

	def test_braces_inside_strings_do_not_end_the_object(self) -> None:
		raw = 'x {"intent":"CHAT","response":"use } and { freely \\" ok"} {"intent":"CANCEL_BOOKING"}'
		candidate = first_balanced_object(raw)
		self.assertEqual(candidate, '{"intent":"CHAT","response":"use } and { freely \\" ok"}')
		self.assertEqual(parse_reply(raw).intent, "CHAT")

	def test_plain_text_degrades_to_chat(self) -> None:
		parsed = parse_reply("Hello there, how can I help?")
		self.assertFalse(parsed.structured)
		self.assertEqual(parsed.intent, "CHAT")
		self.assertEqual(parsed.reply, "Hello there, how can I help?")

	def test_unbalanced_or_invalid_json_degrades_to_chat(self) -> None:
		for raw in ('{"intent": "ADD_EMPLOYEE"', "{intent: ADD_EMPLOYEE}"):
			parsed = parse_reply(raw)
			self.assertEqual(parsed.intent, "CHAT")
			self.assertFalse(parsed.structured)
			self.assertEqual(parsed.reply, raw)

	def test_intent_and_field_aliases_are_normalised(self) -> None:
		raw = (
			'{"intent": "add employee", "entities": {"full_name": "Rahul", "position": "Stylist",'
			' "phone_number": 9876543210, "email": null, "extra": ["x"]}, "reply": "Noted."}'
		)
		parsed = parse_reply(raw)
		self.assertEqual(parsed.intent, "ADD_EMPLOYEE")
		self.assertEqual(parsed.entities, {"name": "Rahul", "role": "Stylist", "phone": "9876543210"})
		self.assertEqual(parsed.reply, "Noted.")

	def test_unknown_intent_becomes_chat(self) -> None:
		parsed = parse_reply('{"intent": "DELETE_DATABASE", "entities": {}}')
		self.assertEqual(parsed.intent, "CHAT")
		self.assertTrue(parsed.structured)
