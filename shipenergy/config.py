from typing import Any, Callable

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./shipenergy.db"
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Fallback cap on active EP tokens for ships without their own override
    max_ep_tokens_allowed: int = 10


settings = Settings()

SETTINGS_NAMESPACE = "shipenergy"

# (namespace, key) -> reader; values are read at call time so overrides on
# the settings object are picked up.
_REGISTERED_SETTINGS: dict[tuple[str, str], Callable[[], Any]] = {
    (SETTINGS_NAMESPACE, "max_ep_tokens_allowed"): lambda: settings.max_ep_tokens_allowed,
}


def get_setting(namespace: str, key: str) -> Any:
    """Return a registered global setting.

    Raises KeyError if no setting is registered under (namespace, key).
    """
    try:
        reader = _REGISTERED_SETTINGS[(namespace, key)]
    except KeyError:
        raise KeyError(f"Unknown setting '{namespace}.{key}'") from None
    return reader()
