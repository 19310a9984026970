from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Hosted backend
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = "dev-anon-key"
    SUPABASE_JWT_SECRET: str = "dev-jwt-secret-not-for-production-use"
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    JWT_ALGORITHM: str = "HS256"
    BACKEND_TIMEOUT_SECONDS: float = 15.0

    # Storage
    STORAGE_BUCKET: str = "service-images"

    # Session
    SESSION_COOKIE_NAME: str = "agrom_session"
    SESSION_COOKIE_SECURE: bool = False
    ALLOWED_ORIGINS: str = "*"

    # Marketplace
    CONTACT_LINK_BASE_URL: str = "https://wa.me"
    PASSWORD_MIN_LENGTH: int = 8
    RATINGS_PREVIEW_LIMIT: int = 3

    # App
    APP_ENV: str = "development"
    APP_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
