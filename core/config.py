from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Property Admin Console API"
    ENV: str = "development"

    # -------------------------------------------------
    # Console Domains
    # -------------------------------------------------
    CONSOLE_DOMAIN: Optional[str] = None

    CONSOLE_DOMAINS: List[str] = [
        "http://localhost:3000",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Rate limits (public auth endpoints)
    # -------------------------------------------------
    LOGIN_RATE_LIMIT_MAX: int = Field(10, description="Login attempts per window per email/IP")
    LOGIN_RATE_LIMIT_WINDOW_SECONDS: int = 300
    SIGNUP_RATE_LIMIT_MAX: int = Field(5, description="Signup requests per window per IP")
    SIGNUP_RATE_LIMIT_WINDOW_SECONDS: int = 3600

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    model_config = SettingsConfigDict(case_sensitive=True)


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add the deployed console domain
if settings.CONSOLE_DOMAIN:
    domain = settings.CONSOLE_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add fixed console domains
cors_origins.extend([d.rstrip("/") for d in settings.CONSOLE_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
