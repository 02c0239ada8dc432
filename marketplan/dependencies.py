# marketplan/dependencies.py
from functools import lru_cache

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer

from marketplan.config import CompletionConfig
from marketplan.services.ai_service import CompletionClient
from marketplan.services.strategy_repository import StrategyRepository
from marketplan.services.strategy_service import StrategyService
from marketplan.services.user_service import get_user_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/token")

def get_current_user(token: str = Depends(oauth2_scheme)):
    # 401 si token invalide, expiré ou compte désactivé
    return get_user_from_token(token)

def require_admin(user = Depends(get_current_user)):
    if not getattr(user, "is_admin", False):
        raise HTTPException(403, "Admin requis")
    return user

@lru_cache
def get_completion_client() -> CompletionClient:
    # construit une seule fois ; ConfigurationError si OpenRouter n'est pas configuré
    return CompletionClient(CompletionConfig.from_settings())

def get_strategy_service() -> StrategyService:
    return StrategyService(StrategyRepository(), get_completion_client())
