# marketplan/routers/auth.py
import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from marketplan.schemas import RegisterOut, Token, UserCreate, UserPublic
from marketplan.services.auth_service import create_access_token
from marketplan.services.user_service import authenticate, create_user

log = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

@router.post("/register", response_model=RegisterOut, status_code=201)
def register(payload: UserCreate):
    # inscription = connexion immédiate
    user = create_user(payload.email, payload.password, payload.full_name)
    log.info("Nouveau compte %s (id=%s)", user.email, user.id)
    return RegisterOut(
        access_token=create_access_token(sub=str(user.id)),
        user=UserPublic.model_validate(user),
    )

@router.post("/token", response_model=Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = authenticate(form_data.username, form_data.password)
    return Token(access_token=create_access_token(sub=str(user.id)))
