import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored next to the code as usersvc.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "usersvc.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 8 hours token lifetime
    SESSION_LIFETIME_SECONDS = 8 * 60 * 60

    # Idle timeout: 20 minutes
    IDLE_TIMEOUT_SECONDS = 20 * 60

    # Brute-force protection: lock engages once attempt > MAX_LOGIN_ATTEMPTS
    MAX_LOGIN_ATTEMPTS = 5
    LOCKOUT_WINDOW_SECONDS = int(os.getenv("LOCKOUT_WINDOW_SECONDS", "1800"))

    # Password hashing cost
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Users listing
    DEFAULT_SORT = "email:asc"

    # Basic app settings
    DEBUG = False
