# timereport/core/config.py
from pydantic_settings import BaseSettings; from dotenv import load_dotenv
load_dotenv()
class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./timereport.db"
    DATA_SOURCE: str = "database"  # "database" or "http"
    DATA_SOURCE_URL: str = "http://localhost:8080"; DATA_SOURCE_TIMEOUT: float = 30.0
    REPORT_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"; LOG_JSON: bool = False
    CHART_HEIGHT: int = 250; CHART_BAR_WIDTH: int = 30; CHART_BAR_MARGIN: int = 15
settings = Settings()
