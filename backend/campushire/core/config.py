"""
Application configuration using Pydantic Settings
"""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # Application
    APP_NAME: str = "CampusHire"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    SECRET_KEY: str = Field(default="change-this-in-production-min-32-characters-required", min_length=32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    
    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_ECHO: bool = False
    
    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_CACHE_TTL: int = 3600
    CACHE_ENABLED: bool = True
    ELIGIBLE_COUNT_CACHE_TTL: int = 300
    
    # Async Tasks
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"
    CELERY_TASK_ALWAYS_EAGER: bool = False
    NOTIFICATIONS_ENABLED: bool = True
    
    # Recruitment
    # Window dates and times are entered in campus local time
    CAMPUS_TIMEZONE: str = "Asia/Kolkata"
    UPCOMING_WINDOWS_LIMIT: int = 10
    BULK_UPDATE_MAX_ITEMS: int = 100
    BULK_ELIGIBILITY_MAX_STUDENTS: int = 50
    BULK_ELIGIBILITY_MAX_OPENINGS: int = 20
    
    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    CORS_ALLOW_CREDENTIALS: bool = True
    
    # Observability
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    
    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
