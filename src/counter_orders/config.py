from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    DB_POOL_TIMEOUT: float = 10.0
    DB_COMMAND_TIMEOUT: float = 5.0

    class Config:
        env_file = ".env"

settings = Settings()
