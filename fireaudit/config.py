# fireaudit/config.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    app_version: str = "2026-10-17.v1"
    database_url: str = "sqlite:///./fireaudit.db"

    # ---- Logging ----
    log_level: str = "INFO"
    sql_log_level: str = "WARNING"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Scheduling ----
    inspection_interval_months: int = 3
    scheduling_window_days: int = 7
    dashboard_upcoming_limit: int = 10

    # ---- Submission ----
    require_failure_photos: bool = True

    # ---- Auth ----
    auth_mode: str = "dev"  # dev|jwt
    dev_auto_provision: bool = True

    dev_header_user_email: str = "X-User-Email"
    dev_header_user_role: str = "X-User-Role"

    jwt_secret: str = "dev-change-me"
    jwt_exp_minutes: int = 60 * 24 * 7  # 7 days

    # ---- Notifications ----
    notification_sender: str = "FireAudit"
    auto_notifications_enabled: bool = True

    # ---- Celery ----
    celery_broker_url: str | None = None
    celery_result_backend: str | None = None
    reminder_sweep_hour_utc: int = 3

    def model_post_init(self, __context) -> None:
        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        if is_prod:
            if (self.auth_mode or "").strip().lower() == "dev":
                raise ValueError("SECURITY: auth_mode=dev is not allowed in prod")
            if self.jwt_secret == "dev-change-me":
                raise ValueError("SECURITY: jwt_secret must be set in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")

        if self.inspection_interval_months < 1:
            raise ValueError("inspection_interval_months must be >= 1")
        if self.scheduling_window_days < 0:
            raise ValueError("scheduling_window_days must be >= 0")


settings = Settings()
