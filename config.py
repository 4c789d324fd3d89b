import os
from dotenv import load_dotenv

load_dotenv()

def _get_bool(name, default):
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# === Upload folders ===
UPLOADS_DIR = os.getenv("UPLOADS_DIR", os.path.join(BASE_DIR, "uploads"))
TEMP_UPLOAD_DIR = os.getenv("TEMP_UPLOAD_DIR", os.path.join(UPLOADS_DIR, "temp"))

# === temp cleanup ===
CLEANUP_MAX_AGE_SEC = float(os.getenv("CLEANUP_MAX_AGE_SEC", 24 * 60 * 60)) # 1 day
CLEANUP_INTERVAL_SEC = float(os.getenv("CLEANUP_INTERVAL_SEC", 3 * 60 * 60)) # 3 hours
CLEANUP_ENABLED = _get_bool("CLEANUP_ENABLED", True)

# === Server ===
APP_ENV = os.getenv("APP_ENV", "development")
PORT = int(os.getenv("PORT", 3000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
