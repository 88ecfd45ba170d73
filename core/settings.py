from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    APP_NAME: str = 'Employee Hierarchy API'
    APP_VERSION: str = '0.1.0'

    # === PostgreSQL ===
    DB_HOST: str = 'localhost'
    DB_PORT: int = 5432
    DB_USER: str = 'postgres'
    DB_PASSWORD: str = 'postgres'
    DB_NAME: str = 'employee_hierarchy'

    # Full URL override, e.g. sqlite+aiosqlite:// for tests
    DATABASE_URL: str | None = None

    # SQLAlchemy
    DRIVER: str = 'postgresql+asyncpg'
    ECHO: bool = False
    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_PRE_PING: bool = True

    # === JWT ===
    JWT_SECRET: str = 'change-me-in-production-please-32b'
    JWT_ALGORITHM: str = 'HS256'
    JWT_EXPIRES_MINUTES: int = 60

    # === Logging ===
    LOG_LEVEL: str = 'INFO'

    # === CORS ===
    CORS_ORIGINS: str = 'http://localhost:3000'

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

    def url(self) -> URL:
        """Build the connection URL without string interpolation of credentials."""
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            drivername=self.DRIVER,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

settings = Settings()
