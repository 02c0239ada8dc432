# marketplan/services/auth_service.py
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from passlib.context import CryptContext
from marketplan.config import settings
from marketplan.errors import ConfigurationError

TOKEN_ISSUER = "marketplan-ia"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def _secret() -> str:
    if not settings.JWT_SECRET_KEY:
        raise ConfigurationError("JWT_SECRET_KEY manquant")
    return settings.JWT_SECRET_KEY

def create_access_token(sub: str, expires_minutes: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    claims = {
        "sub": str(sub),
        "iss": TOKEN_ISSUER,
        "iat": now,
        "exp": now + timedelta(minutes=ttl),
    }
    return jwt.encode(claims, _secret(), algorithm=settings.JWT_ALGORITHM)

def decode_token(token: str) -> dict:
    """Lève JWTError si la signature, l'émetteur ou l'expiration sont invalides."""
    return jwt.decode(token, _secret(), algorithms=[settings.JWT_ALGORITHM], issuer=TOKEN_ISSUER)

__all__ = ["hash_password", "verify_password", "create_access_token", "decode_token", "JWTError"]
