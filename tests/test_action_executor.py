import sqlite3
import tempfile
from pathlib import Path
from unittest import IsolatedAsyncioTestCase

from salon_admin.backend.adapters import sqlite_adapter
from salon_admin.backend.services.action_executor import ActionExecutor
from salon_admin.backend.services.booking_gateway import SqliteBookingGateway
from tests.support import FakeGateway


class ActionExecutorTests(IsolatedAsyncioTestCase):
	async def test_add_employee_passes_only_required_fields(self) -> None:
		gateway = FakeGateway()
		outcome = await ActionExecutor(gateway).execute(
			"ADD_EMPLOYEE",
			{"name": "Rahul", "role": "Stylist", "phone": "9876543210", "email": "rahul@x.com", "note": "x"},
			"Welcome aboard!",
		)
		self.assertTrue(outcome.success)
		self.assertEqual(
			gateway.calls,
			[
				(
					"create_employee_record",
					{"name": "Rahul", "role": "Stylist", "phone": "9876543210", "email": "rahul@x.com"},
				)
			],
		)
		self.assertEqual(outcome.message, "Welcome aboard! (Employee added to database successfully.)")
		self.assertEqual(outcome.result()["data"]["employeeId"], "emp-1")
		self.assertEqual(gateway.logged[0][0], "ADD_EMPLOYEE")

	async def test_missing_fields_do_not_touch_the_database(self) -> None:
		gateway = FakeGateway()
		outcome = await ActionExecutor(gateway).execute("ADD_EMPLOYEE", {"name": "Rahul"}, "")
		self.assertFalse(outcome.success)
		self.assertEqual(outcome.data["missing"], ["role", "phone", "email"])
		self.assertEqual(gateway.calls, [])
		self.assertEqual(gateway.logged, [])

	async def test_unknown_kind_is_rejected(self) -> None:
		gateway = FakeGateway()
		outcome = await ActionExecutor(gateway).execute("CHAT", {}, "hi")
		self.assertFalse(outcome.success)
		self.assertEqual(gateway.calls, [])

	async def test_revenue_message_and_data(self) -> None:
		gateway = FakeGateway(revenue={"total": 160.0, "count": 4})
		outcome = await ActionExecutor(gateway).execute("GET_REVENUE", {"date": "2025-03-14"})
		self.assertTrue(outcome.success)
		self.assertEqual(gateway.calls, [("query_revenue", "2025-03-14", "2025-03-14")])
		self.assertEqual(outcome.message, "The revenue for 2025-03-14 was ₹160 from 4 completed bookings.")
		self.assertEqual(outcome.data, {"date": "2025-03-14", "totalRevenue": 160.0, "bookingCount": 4})

	async def test_database_failure_becomes_a_note(self) -> None:
		gateway = FakeGateway(error=sqlite3.OperationalError("database is locked"))
		outcome = await ActionExecutor(gateway).execute("CANCEL_BOOKING", {"bookingId": "B1"}, "Cancelling B1.")
		self.assertFalse(outcome.success)
		self.assertEqual(
			outcome.message,
			"Cancelling B1. (Note: Failed to execute database action: database is locked)",
		)
		self.assertEqual(outcome.result()["type"], "CANCEL_BOOKING")
		self.assertEqual(gateway.logged, [])

	async def test_reassign_and_assign_messages(self) -> None:
		gateway = FakeGateway()
		executor = ActionExecutor(gateway)
		reassigned = await executor.execute("REASSIGN_APPOINTMENTS", {"employeeName": "Priya", "date": "2025-03-16"})
		assigned = await executor.execute("ASSIGN_BOOKING", {"bookingId": "#B7", "stylistName": "Arjun"})
		self.assertEqual(reassigned.message, "I have reassigned 3 appointments for Priya on 2025-03-16.")
		self.assertEqual(assigned.message, "Booking #B7 is now assigned to Arjun.")


class ActionExecutorSqliteTests(IsolatedAsyncioTestCase):
	def setUp(self) -> None:
		self._tmp = tempfile.TemporaryDirectory()
		self.db_path = str(Path(self._tmp.name) / "salon.db")
		self.executor = ActionExecutor(SqliteBookingGateway(self.db_path))

	def tearDown(self) -> None:
		self._tmp.cleanup()

	async def test_revenue_sums_completed_bookings_in_any_order(self) -> None:
		for amount in (35, 40, 25, 60):
			sqlite_adapter.insert_booking({"date": "2025-03-14", "status": "completed", "amount": amount}, self.db_path)
		sqlite_adapter.insert_booking({"date": "2025-03-14", "status": "cancelled", "amount": 500}, self.db_path)
		sqlite_adapter.insert_booking({"date": "2025-03-13", "status": "completed", "amount": 999}, self.db_path)

		outcome = await self.executor.execute("GET_REVENUE", {"date": "2025-03-14"})

		self.assertTrue(outcome.success)
		self.assertEqual(outcome.data["totalRevenue"], 160)
		self.assertEqual(outcome.data["bookingCount"], 4)
		self.assertIn("₹160", outcome.message)

	async def test_assign_to_unknown_stylist_reports_note(self) -> None:
		booking_id = sqlite_adapter.insert_booking({"date": "2025-03-14"}, self.db_path)
		outcome = await self.executor.execute("ASSIGN_BOOKING", {"bookingId": booking_id, "stylistName": "Nobody"}, "Ok.")
		self.assertFalse(outcome.success)
		self.assertIn("(Note: Failed to execute database action: Employee 'Nobody' not found.", outcome.message)

	async def test_successful_action_is_audited(self) -> None:
		await self.executor.execute(
			"ADD_EMPLOYEE",
			{"name": "Rahul", "role": "Stylist", "phone": "9876543210", "email": "rahul@x.com"},
		)
		actions = sqlite_adapter.list_actions(self.db_path)
		self.assertEqual([row["action_type"] for row in actions], ["ADD_EMPLOYEE"])
		self.assertIn("rahul@x.com", actions[0]["action_data"])
