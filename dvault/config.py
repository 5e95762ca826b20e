import os
from dataclasses import dataclass

from endpoints import BASE_URL, GATEWAY_URL

DEFAULT_CREDENTIALS_PATH = ".dvault/credentials.json"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if not value:
        return default
    return value


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value not in ("0", "false", "FALSE")


def debug_enabled() -> bool:
    return os.getenv("DVAULT_DEBUG", "0") in ("1", "true", "TRUE")


@dataclass
class Settings:
    api_url: str = BASE_URL
    gateway_url: str = GATEWAY_URL
    credentials_path: str = DEFAULT_CREDENTIALS_PATH
    http_log_path: str = "dvault_http.log"
    timeout: float = 60.0
    page_limit: int = 100
    # Keep the last good listing when a refresh fails unless asked otherwise.
    clear_on_refresh_error: bool = False


def load_settings() -> Settings:
    return Settings(
        api_url=_env_str("DVAULT_API_URL", BASE_URL).rstrip("/"),
        gateway_url=_env_str("DVAULT_GATEWAY_URL", GATEWAY_URL).rstrip("/"),
        credentials_path=_env_str("DVAULT_CREDENTIALS_PATH", DEFAULT_CREDENTIALS_PATH),
        http_log_path=_env_str("DVAULT_HTTP_LOG", os.path.join(os.getcwd(), "dvault_http.log")),
        timeout=_env_float("DVAULT_TIMEOUT", 60.0),
        page_limit=max(_env_int("DVAULT_PAGE_LIMIT", 100), 1),
        clear_on_refresh_error=_env_bool("DVAULT_CLEAR_ON_REFRESH_ERROR", False),
    )
