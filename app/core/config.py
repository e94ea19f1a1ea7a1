import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_int(value):
    if value is None or value.strip() == "":
        return None
    return int(value)


class Settings:
    # AWS
    AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
    DYNAMODB_ENDPOINT_URL = os.getenv("DYNAMODB_ENDPOINT_URL")

    # Users table
    USERS_TABLE = os.getenv("USERS_TABLE", "users")
    SCAN_PAGE_SIZE = _as_int(os.getenv("SCAN_PAGE_SIZE"))

    # Responses
    LEGACY_STATUS_CODES = _as_bool(os.getenv("LEGACY_STATUS_CODES"))

    # App
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    ]

settings = Settings()
