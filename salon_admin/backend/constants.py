APP_NAME = "Salon Admin Assistant"
APP_VERSION = "1.0.0"
DEFAULT_DB_PATH = "salon_admin.db"
DEFAULT_CORS_ALLOW_ORIGINS = [
	"http://localhost",
	"http://127.0.0.1",
	"http://localhost:3000",
]
DEFAULT_TRUSTED_HOSTS = [
	"127.0.0.1",
	"localhost",
	"testserver",
]
SQLITE_BUSY_TIMEOUT_MS = 5000

DEFAULT_SESSION_ID = "default-session"

CAPABILITY_ORDER = (
	"conversation",
	"transcription",
	"entity_extraction",
)

BOOKING_STATUS_COMPLETED = "completed"
BOOKING_STATUS_ASSIGNED = "assigned"
BOOKING_STATUS_CANCELLED = "cancelled"
BOOKING_STATUS_RESCHEDULE = "reschedule"
EMPLOYEE_STATUS_AVAILABLE = "available"
EMPLOYEE_STATUS_BUSY = "busy"
DEFAULT_WORK_SCHEDULE = "Mon-Sat, 10AM-7PM"
BOOKING_PREFIX_SCAN_LIMIT = 100
