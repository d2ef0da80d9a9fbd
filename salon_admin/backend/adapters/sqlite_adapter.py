from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from salon_admin.backend import constants


class RecordNotFoundError(LookupError):
	pass


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _get_db_path(db_path: Optional[str]) -> str:
	if db_path:
		return db_path
	return constants.DEFAULT_DB_PATH


def _connect(path: str) -> sqlite3.Connection:
	conn = sqlite3.connect(path, timeout=constants.SQLITE_BUSY_TIMEOUT_MS / 1000)
	conn.execute("PRAGMA journal_mode=WAL")
	conn.execute("PRAGMA synchronous=NORMAL")
	conn.execute(f"PRAGMA busy_timeout={constants.SQLITE_BUSY_TIMEOUT_MS}")
	conn.execute("PRAGMA foreign_keys=ON")
	conn.row_factory = sqlite3.Row
	return conn


def init_db(db_path: Optional[str] = None) -> None:
	path = _get_db_path(db_path)
	Path(path).parent.mkdir(parents=True, exist_ok=True)
	conn = _connect(path)
	try:
		conn.execute(
			"""
			CREATE TABLE IF NOT EXISTS employees (
				id TEXT PRIMARY KEY,
				name TEXT NOT NULL,
				role TEXT,
				phone TEXT,
				email TEXT,
				status TEXT NOT NULL,
				rating REAL,
				total_bookings INTEGER NOT NULL DEFAULT 0,
				work_schedule TEXT,
				created_at TEXT NOT NULL,
				updated_at TEXT NOT NULL
			)
			"""
		)
		conn.execute(
			"""
			CREATE TABLE IF NOT EXISTS bookings (
				id TEXT PRIMARY KEY,
				client_name TEXT,
				salon_id TEXT,
				service_name TEXT,
				employee_id TEXT,
				assigned_employee_id TEXT,
				assigned_employee_name TEXT,
				previous_employee_id TEXT,
				date TEXT NOT NULL,
				time TEXT,
				status TEXT NOT NULL,
				amount REAL,
				price REAL,
				created_at TEXT NOT NULL,
				updated_at TEXT NOT NULL
			)
			"""
		)
		conn.execute(
			"""
			CREATE TABLE IF NOT EXISTS admin_actions_log (
				id INTEGER PRIMARY KEY AUTOINCREMENT,
				action_type TEXT NOT NULL,
				action_data TEXT,
				created_at TEXT NOT NULL
			)
			"""
		)
		conn.execute("CREATE INDEX IF NOT EXISTS idx_bookings_status_date ON bookings (status, date)")
		conn.commit()
	finally:
		conn.close()


def create_employee(fields: Mapping[str, Any], db_path: Optional[str] = None) -> Dict[str, Any]:
	"""Insert an employee, or return the existing one with the same email."""
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		email = str(fields.get("email") or "").strip().lower()
		if email:
			row = conn.execute("SELECT id FROM employees WHERE lower(email) = ?", (email,)).fetchone()
			if row is not None:
				return {"employee_id": row["id"], "created": False}
		employee_id = uuid.uuid4().hex
		now = _now_iso()
		conn.execute(
			"""
			INSERT INTO employees (
				id, name, role, phone, email, status, rating, total_bookings, work_schedule, created_at, updated_at
			)
			VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?, ?)
			""",
			(
				employee_id,
				fields.get("name"),
				fields.get("role"),
				fields.get("phone"),
				fields.get("email"),
				constants.EMPLOYEE_STATUS_AVAILABLE,
				5,
				constants.DEFAULT_WORK_SCHEDULE,
				now,
				now,
			),
		)
		conn.commit()
		return {"employee_id": employee_id, "created": True}
	finally:
		conn.close()


def completed_revenue(start_date: str, end_date: str, db_path: Optional[str] = None) -> Dict[str, Any]:
	"""Sum completed bookings dated within ``[start_date, end_date]`` inclusive."""
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		rows = conn.execute(
			"""
			SELECT amount, price
			FROM bookings
			WHERE status = ? AND date >= ? AND date <= ?
			""",
			(constants.BOOKING_STATUS_COMPLETED, start_date, end_date),
		).fetchall()
	finally:
		conn.close()
	total: float = 0
	for row in rows:
		value = row["amount"] if row["amount"] is not None else row["price"]
		total += value or 0
	return {"total": total, "count": len(rows)}


def _find_employee(conn: sqlite3.Connection, name: str) -> sqlite3.Row:
	row = conn.execute(
		"SELECT id, name FROM employees WHERE lower(name) = lower(?) ORDER BY created_at LIMIT 1",
		(name.strip(),),
	).fetchone()
	if row is None:
		raise RecordNotFoundError(f"Employee '{name}' not found. Please verify the name.")
	return row


def _resolve_booking_id(conn: sqlite3.Connection, booking_id: str) -> str:
	clean = booking_id.strip().lstrip("#")
	row = conn.execute("SELECT id FROM bookings WHERE id = ?", (clean,)).fetchone()
	if row is not None:
		return row["id"]
	# Dashboards show truncated ids; accept a prefix of a recent booking.
	recent = conn.execute(
		"SELECT id FROM bookings ORDER BY created_at DESC LIMIT ?",
		(constants.BOOKING_PREFIX_SCAN_LIMIT,),
	).fetchall()
	for candidate in recent:
		if clean and candidate["id"].startswith(clean):
			return candidate["id"]
	raise RecordNotFoundError(f"Booking ID '{booking_id}' not found.")


def reassign_bookings(employee_name: str, date: str, db_path: Optional[str] = None) -> int:
	"""Flag every booking of the employee on ``date`` for rescheduling in one transaction."""
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		employee = _find_employee(conn, employee_name)
		with conn:
			cursor = conn.execute(
				"""
				UPDATE bookings
				SET status = ?, previous_employee_id = employee_id, updated_at = ?
				WHERE employee_id = ? AND date = ?
				""",
				(constants.BOOKING_STATUS_RESCHEDULE, _now_iso(), employee["id"], date),
			)
		return cursor.rowcount
	finally:
		conn.close()


def assign_booking(booking_id: str, stylist_name: str, db_path: Optional[str] = None) -> Dict[str, str]:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		employee = _find_employee(conn, stylist_name)
		resolved_id = _resolve_booking_id(conn, booking_id)
		now = _now_iso()
		with conn:
			conn.execute(
				"""
				UPDATE bookings
				SET assigned_employee_id = ?, assigned_employee_name = ?, status = ?, updated_at = ?
				WHERE id = ?
				""",
				(employee["id"], employee["name"], constants.BOOKING_STATUS_ASSIGNED, now, resolved_id),
			)
			conn.execute(
				"UPDATE employees SET status = ?, updated_at = ? WHERE id = ?",
				(constants.EMPLOYEE_STATUS_BUSY, now, employee["id"]),
			)
		return {"booking_id": resolved_id, "employee_name": employee["name"]}
	finally:
		conn.close()


def cancel_booking(booking_id: str, db_path: Optional[str] = None) -> str:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		resolved_id = _resolve_booking_id(conn, booking_id)
		with conn:
			conn.execute(
				"UPDATE bookings SET status = ?, updated_at = ? WHERE id = ?",
				(constants.BOOKING_STATUS_CANCELLED, _now_iso(), resolved_id),
			)
		return resolved_id
	finally:
		conn.close()


def log_action(action_type: str, action_data: Mapping[str, Any], db_path: Optional[str] = None) -> None:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		conn.execute(
			"INSERT INTO admin_actions_log (action_type, action_data, created_at) VALUES (?, ?, ?)",
			(action_type, json.dumps(dict(action_data), default=str), _now_iso()),
		)
		conn.commit()
	finally:
		conn.close()


def insert_booking(fields: Mapping[str, Any], db_path: Optional[str] = None) -> str:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		booking_id = str(fields.get("id") or uuid.uuid4().hex)
		now = _now_iso()
		conn.execute(
			"""
			INSERT INTO bookings (
				id, client_name, salon_id, service_name, employee_id, date, time, status, amount, price,
				created_at, updated_at
			)
			VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
			""",
			(
				booking_id,
				fields.get("client_name"),
				fields.get("salon_id"),
				fields.get("service_name"),
				fields.get("employee_id"),
				fields["date"],
				fields.get("time"),
				fields.get("status", "confirmed"),
				fields.get("amount"),
				fields.get("price"),
				fields.get("created_at", now),
				now,
			),
		)
		conn.commit()
		return booking_id
	finally:
		conn.close()


def get_booking(booking_id: str, db_path: Optional[str] = None) -> Optional[Dict[str, Any]]:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		row = conn.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)).fetchone()
		return dict(row) if row is not None else None
	finally:
		conn.close()


def list_employees(db_path: Optional[str] = None) -> List[Dict[str, Any]]:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		return [dict(row) for row in conn.execute("SELECT * FROM employees ORDER BY created_at").fetchall()]
	finally:
		conn.close()


def list_actions(db_path: Optional[str] = None) -> List[Dict[str, Any]]:
	init_db(db_path)
	conn = _connect(_get_db_path(db_path))
	try:
		rows = conn.execute("SELECT action_type, action_data, created_at FROM admin_actions_log ORDER BY id").fetchall()
		return [dict(row) for row in rows]
	finally:
		conn.close()


def get_storage_meta(db_path: Optional[str] = None) -> Dict[str, object]:
	init_db(db_path)
	path = _get_db_path(db_path)
	conn = _connect(path)
	try:
		quick_check = conn.execute("PRAGMA quick_check").fetchone()[0]
		journal_mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
		return {
			"path": path,
			"journal_mode": journal_mode,
			"quick_check": quick_check,
		}
	finally:
		conn.close()
