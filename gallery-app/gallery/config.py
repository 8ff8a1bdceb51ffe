import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.getenv("GALLERY_DATA_DIR", BASE_DIR / "data"))
REPORTS_DIR = DATA_DIR / "reports"
UPLOADS_DIR = Path(os.getenv("GALLERY_UPLOADS_DIR", BASE_DIR / "uploads"))

# Ensure directories exist
REPORTS_DIR.mkdir(parents=True, exist_ok=True)
UPLOADS_DIR.mkdir(parents=True, exist_ok=True)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{(DATA_DIR / 'gallery.db').as_posix()}")

ADMIN_PORT = int(os.getenv("ADMIN_PORT", "5001"))
PUBLIC_PORT = int(os.getenv("PUBLIC_PORT", "5000"))

SESSION_LIFETIME = timedelta(hours=24)

# Upload limits
MAX_IMAGE_BYTES = 200 * 1024
MAX_FILES_PER_UPLOAD = 10
# Whole request ceiling: a full batch plus multipart overhead
MAX_CONTENT_LENGTH = MAX_FILES_PER_UPLOAD * MAX_IMAGE_BYTES + 512 * 1024

# First master account, created when the admins table is empty
SEED_MASTER_USERNAME = os.getenv("SEED_MASTER_USERNAME", "master")
SEED_MASTER_PASSWORD = os.getenv("SEED_MASTER_PASSWORD", "change-me-in-production")

# Like endpoint rate limiting (per client IP)
LIKE_RATE_LIMIT_MAX = int(os.getenv("LIKE_RATE_LIMIT_MAX", "10"))
LIKE_RATE_LIMIT_WINDOW = int(os.getenv("LIKE_RATE_LIMIT_WINDOW", "60"))  # seconds

# Email config for daily reports
GMAIL_ADDRESS = os.getenv("GMAIL_ADDRESS", "")
GMAIL_APP_PASSWORD = os.getenv("GMAIL_APP_PASSWORD", "")
REPORT_EMAIL = os.getenv("REPORT_EMAIL", GMAIL_ADDRESS)
