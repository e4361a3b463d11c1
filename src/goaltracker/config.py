from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL, the path names the database, e.g. mongodb://localhost/goaltracker
    host: str
    port: int
    debug: bool = False
    session_secret_key: str
    session_cookie_name: str = "sid"
    session_max_age: int = 24 * 60 * 60  # Session TTL and cookie max-age, in seconds
    https_only: bool = False  # Mark the session cookie Secure (enable behind HTTPS)
    database_timeout_ms: int = 10_000  # Upper bound for every database round trip
    password_hash_rounds: int = 12  # bcrypt cost factor

    model_config = {
        "env_file": [".env"],
        "env_prefix": "GOALTRACKER_",
        "extra": "ignore",
    }
