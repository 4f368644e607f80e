from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database settings
    DB_URL: Optional[str] = None  # Optional full DB URL
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "lending_pool"

    # API settings
    API_VERSION: str = "v1"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"  # "standard" or "json"

    # Loan defaults for admin-created loans
    DEFAULT_INTEREST_RATE: float = 15.0
    DEFAULT_LOAN_DURATION_MONTHS: int = 12

    # Cash bill statements and reports
    CASH_BILL_TITLE: str = "CASH BILL MEETING 85"
    CURRENCY_SYMBOL: str = "₹"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        validate_default = True
        extra = "ignore"

    @property
    def sync_db_url(self) -> str:
        """Get synchronous database URL."""
        if self.DB_URL:
            return self.DB_URL.replace("mysql+aiomysql", "mysql+pymysql")
        return f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def async_db_url(self) -> str:
        """Get asynchronous database URL."""
        if self.DB_URL:
            return self.DB_URL
        return f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance to avoid reloading .env file on every access
    """
    return Settings()


settings = get_settings()
