import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "zencorp_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

LATE_AFTER = "09:00"
LATE_GRACE_MINUTES = 0

FACE_VERIFIER_ENABLED = False
FACE_MATCH_THRESHOLD = 0.56

SUBTASK_GATE_ROLES = ("employee", "unit_lead")

LOG_LEVEL = "WARNING"
LOG_DIR = ""
