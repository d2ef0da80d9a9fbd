from __future__ import annotations

import argparse
from datetime import date

from salon_admin.backend import constants
from salon_admin.backend.services.demo_data import seed_demo_data


def main() -> int:
	parser = argparse.ArgumentParser(description="Seed the salon database with demo employees and bookings.")
	parser.add_argument("--db", default=constants.DEFAULT_DB_PATH, help="SQLite database path.")
	parser.add_argument("--date", default=None, help="Day of the completed bookings (YYYY-MM-DD, default yesterday).")
	args = parser.parse_args()

	try:
		day = date.fromisoformat(args.date) if args.date else None
	except ValueError:
		raise SystemExit(f"Invalid --date value: {args.date}")

	summary = seed_demo_data(args.db, day)
	print(f"employees: {len(summary['employees'])}")
	print(f"completed bookings on {summary['date']}: {len(summary['completed_bookings'])}")
	print(f"upcoming bookings: {len(summary['upcoming_bookings'])}")
	print(f"expected revenue: {summary['expected_revenue']}")
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
