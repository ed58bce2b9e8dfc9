from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    DATABASE_URL: str
    DB_ECHO: bool = False

    # Map client defaults (satellite view over the garden)
    MAP_CENTER_LON: float = 13.268969332277585
    MAP_CENTER_LAT: float = 57.47291624111792
    MAP_DEFAULT_ZOOM: float = 18
    MAP_MIN_ZOOM: float = 14
    MAP_MAX_ZOOM: float = 20

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:5174"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
