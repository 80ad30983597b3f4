import os
from dotenv import load_dotenv

# .env is optional, real environment variables win
load_dotenv()


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./kisa.db")
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,https://kisabeautyschool.education",
        ).split(",")
        if origin.strip()
    ]
    SITE_URL = os.getenv("SITE_URL", "https://kisabeautyschool.education").rstrip("/")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- E-MAIL (Resend) ---
    RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "Kisa Beauty School <onboarding@resend.dev>")
    ADMIN_EMAILS = [
        addr.strip()
        for addr in os.getenv("ADMIN_EMAILS", "").split(",")
        if addr.strip()
    ]


settings = Settings()
