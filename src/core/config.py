from urllib.parse import quote

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # When set, DATABASE_URL wins over the DB_* parts below (used for sqlite in tests)
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "kanban"
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = ""

    # No default, a missing key has to stop the app from starting
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def db_conn_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            "postgresql+psycopg://"  # Ensures we use psycopg3
            f"{self.db_credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def db_credentials(self):
        # https://stackoverflow.com/a/68268537
        if self.DB_PASSWORD:
            credentials = f"{self.DB_USERNAME}:{quote(self.DB_PASSWORD)}"
        else:
            credentials = self.DB_USERNAME
        return credentials

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
