from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_COOKIE_VALUE = "1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CAFE_", extra="ignore")

    app_name: str = "Cafeteria Orders"
    env: str = "dev"
    log_level: str = "INFO"

    database_url: str = "sqlite+pysqlite:///./cafeteria.db"

    admin_password: str | None = None
    admin_cookie_name: str = "admin_session"
    admin_cookie_value: str = DEFAULT_ADMIN_COOKIE_VALUE
    admin_cookie_max_age: int = 60 * 60 * 12

    stats_timezone: str | None = Field(
        default=None,
        description="IANA zone used for calendar days in stats; server local time when unset",
    )

    seed_demo_on_startup: bool = False

    def model_post_init(self, __context) -> None:
        if self.env.lower() == "dev":
            return

        insecure_items: list[str] = []
        if not self.admin_password:
            insecure_items.append("CAFE_ADMIN_PASSWORD")
        if self.admin_cookie_value == DEFAULT_ADMIN_COOKIE_VALUE:
            insecure_items.append("CAFE_ADMIN_COOKIE_VALUE")

        if insecure_items:
            raise ValueError(
                "insecure defaults are not allowed outside dev mode; set env vars: "
                + ", ".join(sorted(insecure_items))
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
