from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "local"
    log_level: str = "INFO"
    return_status_code: bool = False
    return_stack_trace: bool = False
    metrics_enabled: bool = False
    metrics_token: str = ""

    @model_validator(mode="after")
    def validate_production_guardrails(self) -> "Settings":
        if self.app_env.lower() == "production" and self.return_stack_trace:
            raise ValueError("Production forbids RETURN_STACK_TRACE; stack traces must not reach clients.")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
