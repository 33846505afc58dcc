from typing import Any, Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and v.strip() == "*":
        return "*"
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "sqlbridge/.env"), env_ignore_empty=True, extra="ignore"
    )
    PROJECT_NAME: str = "DB Manager AI Server"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "development", "production"] = "local"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    UVICORN_RELOAD: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./"
    LOG_FILE: str = "sqlbridge.log"
    LOG_TO_FILE: bool = False
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "sqlbridge"

    CORS_ENABLED: bool = True
    CORS_ORIGIN: str = "*"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        parsed = parse_cors(self.CORS_ORIGIN)
        return ["*"] if parsed == "*" else list(parsed)

    DEFAULT_SQLITE_PATH: str = "./database.db"
    POSTGRES_DEFAULT_PORT: int = 5432
    MYSQL_DEFAULT_PORT: int = 3306

    # OpenRouter speaks the OpenAI chat completions protocol.
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_MODEL: str = "openai/gpt-4o-mini"
    APP_URL: str = "http://localhost:3000"
    APP_TITLE: str = "AI Database Assistant Manager"
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 400

    @computed_field  # type: ignore[prop-decorator]
    @property
    def llm_enabled(self) -> bool:
        return bool(self.OPENROUTER_API_KEY)


settings = Settings()  # type: ignore
