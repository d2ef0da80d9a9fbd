from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

from salon_admin.backend.adapters import sqlite_adapter

DEMO_SERVICES = (
	("Hair Cut", 25),
	("Hair Coloring", 60),
	("Makeup", 40),
	("Hair Styling", 35),
)

DEMO_EMPLOYEES = (
	{"name": "Priya Sharma", "role": "Stylist", "phone": "9876500001", "email": "priya@salon.example"},
	{"name": "Arjun Mehta", "role": "Colorist", "phone": "9876500002", "email": "arjun@salon.example"},
)


def seed_demo_data(db_path: str, day: Optional[date] = None) -> Dict[str, object]:
	"""Completed bookings for ``day`` (yesterday by default) plus open ones for the next day."""
	day = day or (date.today() - timedelta(days=1))
	next_day = day + timedelta(days=1)
	employee_ids: List[str] = [
		str(sqlite_adapter.create_employee(fields, db_path)["employee_id"]) for fields in DEMO_EMPLOYEES
	]

	completed: List[str] = []
	for index, (service, price) in enumerate(DEMO_SERVICES):
		completed.append(
			sqlite_adapter.insert_booking(
				{
					"client_name": f"Client {index + 1}",
					"salon_id": "salon1",
					"service_name": service,
					"employee_id": employee_ids[index % len(employee_ids)],
					"date": day.isoformat(),
					"time": f"{10 + index}:00",
					"status": "completed",
					"amount": price,
					"price": price,
				},
				db_path,
			)
		)

	upcoming = [
		sqlite_adapter.insert_booking(
			{
				"client_name": f"Client {index + 5}",
				"salon_id": "salon1",
				"service_name": service,
				"employee_id": employee_ids[0],
				"date": next_day.isoformat(),
				"time": f"{11 + index}:30",
				"status": "confirmed",
				"price": price,
			},
			db_path,
		)
		for index, (service, price) in enumerate(DEMO_SERVICES[:2])
	]

	return {
		"date": day.isoformat(),
		"employees": employee_ids,
		"completed_bookings": completed,
		"upcoming_bookings": upcoming,
		"expected_revenue": sum(price for _, price in DEMO_SERVICES),
	}
