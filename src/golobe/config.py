from os import environ

from pydantic import BaseModel, ConfigDict


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    dynamodb_endpoint: str | None = None
    users_table: str
    accounts_table: str
    bookings_table: str
    analytics_table: str
    unique_keys_table: str
    email_sender: str
    app_name: str = "Golobe"
    app_url: str = ""
    bcrypt_rounds: int = 10
    log_level: str = "INFO"
    environment: str


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config. For testing only."""
    global _cached_config
    _cached_config = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        dynamodb_endpoint=environ.get("DYNAMODB_ENDPOINT"),
        users_table=environ.get("USERS_TABLE", "GolobeUsers"),
        accounts_table=environ.get("ACCOUNTS_TABLE", "GolobeAccounts"),
        bookings_table=environ.get("BOOKINGS_TABLE", "GolobeBookings"),
        analytics_table=environ.get("ANALYTICS_TABLE", "GolobeAnalytics"),
        unique_keys_table=environ.get("UNIQUE_KEYS_TABLE", "GolobeUniqueKeys"),
        email_sender=environ.get("EMAIL_SENDER", "no-reply@golobe.local"),
        app_name=environ.get("APP_NAME", "Golobe"),
        app_url=environ.get("APP_URL", "http://localhost:3000"),
        bcrypt_rounds=int(environ.get("BCRYPT_ROUNDS", "10")),
        log_level=environ.get("LOG_LEVEL", "INFO"),
        environment=environ.get("ENVIRONMENT", "local"),
    )
    return _cached_config
