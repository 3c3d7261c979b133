from os import getenv
from dotenv import load_dotenv

load_dotenv()

class Config:

    ALLOWED_ORIGINS: list = getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

    # AI-сервис (спецификации и подсказки по цене)
    AI_API_BASE_URL: str = getenv("AI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    AI_API_TOKEN: str = getenv("AI_API_TOKEN")
    AI_MODEL: str = getenv("AI_MODEL", "gemini-2.5-flash")
    AI_TIMEOUT_SECONDS: int = int(getenv("AI_TIMEOUT_SECONDS", "30"))

    # Маркетплейс
    DEFAULT_CITY: str = getenv("DEFAULT_CITY", "Satara")
    SEED_DEMO_DATA: bool = getenv("SEED_DEMO_DATA", "true").lower() in ("1", "true", "yes")

    # Порт приложения
    APP_PORT: int = int(getenv("APP_PORT", "8000"))

    def validate(self) -> None:
        """Проверяет корректность значений из окружения."""
        errors = []
        if not self.AI_API_BASE_URL:
            errors.append("AI_API_BASE_URL must not be empty")
        if self.AI_TIMEOUT_SECONDS <= 0:
            errors.append("AI_TIMEOUT_SECONDS must be positive")
        if not 0 < self.APP_PORT < 65536:
            errors.append("APP_PORT must be a valid TCP port")
        if not self.DEFAULT_CITY:
            errors.append("DEFAULT_CITY must not be empty")
        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

settings = Config()
settings.validate()
