import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

REQUIRED_ENV_VARS = ("AIRTABLE_BASE_ID", "AIRTABLE_TABLE_NAME", "AIRTABLE_PAT")


class ConfigError(Exception):
    pass


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_str(name: str) -> str:
    return (os.getenv(name) or "").strip()


@dataclass(frozen=True)
class Settings:
    airtable_base_id: str
    airtable_table_name: str
    airtable_pat: str
    airtable_api_base_url: str = "https://api.airtable.com/v0"
    port: int = 3000
    log_level: str = "INFO"


def load_settings() -> Settings:
    missing = [name for name in REQUIRED_ENV_VARS if not _get_str(name)]
    if missing:
        raise ConfigError(
            "Missing one or more required environment variables: " + ", ".join(missing)
        )
    return Settings(
        airtable_base_id=_get_str("AIRTABLE_BASE_ID"),
        airtable_table_name=_get_str("AIRTABLE_TABLE_NAME"),
        airtable_pat=_get_str("AIRTABLE_PAT"),
        airtable_api_base_url=os.getenv("AIRTABLE_API_BASE_URL", "https://api.airtable.com/v0"),
        port=_get_int("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
