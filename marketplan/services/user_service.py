# marketplan/services/user_service.py
from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import select

from marketplan.db import get_session
from marketplan.models import User, utcnow
from marketplan.services.auth_service import decode_token, hash_password, verify_password, JWTError

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_user_by_email(email: str) -> Optional[User]:
    with get_session() as session:
        return session.exec(select(User).where(User.email == email.strip().lower())).first()

def create_user(email: str, password: str, full_name: Optional[str] = None) -> User:
    """Crée un compte free ; 409 si l'email est déjà pris."""
    if get_user_by_email(email):
        raise HTTPException(status.HTTP_409_CONFLICT, "Cet email est déjà utilisé")
    user = User(
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        full_name=(full_name or "").strip() or None,
        plan="free",
    )
    return touch_last_login(user)

def touch_last_login(user: User) -> User:
    user.last_login_at = utcnow()
    with get_session() as session:
        session.add(user)
        session.commit()
        session.refresh(user)
    return user

def authenticate(email: str, password: str) -> User:
    """
    Vérifie email + mot de passe. Même message pour un email inconnu et un
    mauvais mot de passe ; un compte désactivé est refusé explicitement.
    """
    user = get_user_by_email(email)
    if not user or not verify_password(password, user.hashed_password):
        raise _unauthorized("Email ou mot de passe incorrect")
    if not user.is_active:
        raise _unauthorized("Votre compte a été désactivé")
    return touch_last_login(user)

def get_user_from_token(token: str) -> User:
    try:
        sub = decode_token(token).get("sub")
    except JWTError:
        raise _unauthorized("Could not validate credentials")
    if sub is None or not str(sub).isdigit():
        raise _unauthorized("Could not validate credentials")

    with get_session() as session:
        user = session.get(User, int(sub))
    if not user:
        raise _unauthorized("Could not validate credentials")
    if not user.is_active:
        raise _unauthorized("Votre compte a été désactivé")
    return user
