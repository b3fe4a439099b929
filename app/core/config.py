from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal
from pydantic import field_validator

class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = 'sqlite:///./papeleria.db'
    DATABASE_ECHO: bool = False

    # Protocolo de ventas
    # False reproduce el comportamiento observado: la creación no verifica stock
    VERIFY_STOCK_ON_CREATE: bool = False
    # read_write: leer y escribir (last writer wins); compare_and_swap: escritura condicional
    STOCK_ADJUST_MODE: Literal["read_write", "compare_and_swap"] = "read_write"
    STOCK_CAS_ATTEMPTS: int = 3

    # Reportes
    LOW_STOCK_THRESHOLD: int = 10
    BEST_SELLERS_LIMIT: int = 5

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", "DATABASE_ECHO", "VERIFY_STOCK_ON_CREATE", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)

    @field_validator("STOCK_CAS_ATTEMPTS")
    @classmethod
    def validate_attempts(cls, v):
        if v < 1:
            raise ValueError("STOCK_CAS_ATTEMPTS debe ser al menos 1")
        return v

settings = Settings()
