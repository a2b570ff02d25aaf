import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "zencorp"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo catalogs, employees and accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Attendance: fallback start of day when an employee has no working hours
LATE_AFTER = os.getenv("LATE_AFTER", "09:00")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "0"))

FACE_VERIFIER_ENABLED = bool(int(os.getenv("FACE_VERIFIER_ENABLED", "0")))
FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.56"))

# Roles that must tick every sub-task before completing a task
SUBTASK_GATE_ROLES = tuple(
    r.strip() for r in os.getenv("SUBTASK_GATE_ROLES", "employee,unit_lead").split(",") if r.strip()
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = os.getenv("LOG_DIR", ".local/zencorp")
