# marketplan/config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()  # utile en local; en prod les variables sont injectées par la plateforme

class Settings:
    # Service de complétion (OpenRouter, API compatible OpenAI)
    OPENROUTER_BASE_URL: str = os.getenv("OPENROUTER_BASE_URL", "")
    OPENROUTER_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")
    OPENROUTER_MODEL: str = os.getenv("OPENROUTER_MODEL", "nvidia/nemotron-3-nano-30b-a3b:free")
    OPENROUTER_TEMPERATURE: float = float(os.getenv("OPENROUTER_TEMPERATURE", "0.7"))
    OPENROUTER_TIMEOUT: float = float(os.getenv("OPENROUTER_TIMEOUT", "120"))

    # Base de données
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./marketplan.db")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() in ("true", "1", "yes")

    # Auth/JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60*24))

    # Garde-fou sur les consignes libres envoyées au modèle
    MAX_INSTRUCTION_LENGTH: int = int(os.getenv("MAX_INSTRUCTION_LENGTH", "2000"))

    # Divers
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ALLOWED_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ]

settings = Settings()


@dataclass(frozen=True)
class CompletionConfig:
    """Paramètres figés du service de complétion, injectés dans le client."""
    base_url: str
    api_key: str
    model: str
    temperature: float = 0.7
    timeout: float = 120.0

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "CompletionConfig":
        return cls(
            base_url=s.OPENROUTER_BASE_URL,
            api_key=s.OPENROUTER_API_KEY,
            model=s.OPENROUTER_MODEL,
            temperature=s.OPENROUTER_TEMPERATURE,
            timeout=s.OPENROUTER_TIMEOUT,
        )
