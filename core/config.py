import os

from dotenv import load_dotenv

# Load environment variables from .env file, if it exists
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "t", "yes")


# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL")
DB_HOST = os.getenv("DB_HOST")
DB_PORT = os.getenv("DB_PORT", "5432")  # Default PostgreSQL port
DB_NAME = os.getenv("DB_NAME")
DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
INSTANCE_CONNECTION_NAME = os.getenv("INSTANCE_CONNECTION_NAME")  # For Cloud SQL Proxy
SQL_ECHO = _env_flag("SQL_ECHO")

# --- CORS ---
DEV_DOMAIN = os.getenv("DEV_DOMAIN", "http://localhost:5173")
PRODUCTION_DOMAIN = os.getenv("PRODUCTION_DOMAIN", "https://shifts.example.org")

# --- Shift / dashboard behaviour ---
SHIFT_HISTORY_LIMIT = int(os.getenv("SHIFT_HISTORY_LIMIT", "10"))
STAFF_HISTORY_LIMIT = int(os.getenv("STAFF_HISTORY_LIMIT", "50"))
ANALYTICS_WINDOW_DAYS = int(os.getenv("ANALYTICS_WINDOW_DAYS", "7"))
VIEW_CACHE_TTL_SECONDS = float(os.getenv("VIEW_CACHE_TTL_SECONDS", "60"))

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def build_database_url() -> str:
    """
    Resolve the SQLAlchemy URL for the relational store.

    DATABASE_URL wins when set. Otherwise the URL is assembled from the DB_*
    variables, using the Cloud SQL unix socket when INSTANCE_CONNECTION_NAME
    is present.
    """
    if DATABASE_URL:
        return DATABASE_URL

    required_vars_for_tcp = ["DB_HOST", "DB_NAME", "DB_USER", "DB_PASSWORD"]
    required_vars_for_socket = ["DB_NAME", "DB_USER", "DB_PASSWORD", "INSTANCE_CONNECTION_NAME"]

    if INSTANCE_CONNECTION_NAME:
        missing_vars = [var for var in required_vars_for_socket if not os.getenv(var)]
        if missing_vars:
            raise ValueError(
                f"Missing required environment variables for Cloud SQL (socket): {', '.join(missing_vars)}"
            )
        return (
            f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@/{DB_NAME}"
            f"?host=/cloudsql/{INSTANCE_CONNECTION_NAME}"
        )

    missing_vars = [var for var in required_vars_for_tcp if not os.getenv(var)]
    if missing_vars:
        raise ValueError(
            f"Missing required environment variables for TCP: {', '.join(missing_vars)}"
        )
    return f"postgresql+psycopg2://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"


def allowed_origins() -> list[str]:
    origins = [
        DEV_DOMAIN,
        PRODUCTION_DOMAIN,
        "http://localhost:3000",  # Additional fallback for React dev
        "http://127.0.0.1:5173",  # Additional fallback for Vite dev
    ]
    # Remove any None values and duplicates
    return sorted(set(origin for origin in origins if origin))
