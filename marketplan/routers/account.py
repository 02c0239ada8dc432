# marketplan/routers/account.py
from fastapi import APIRouter, Depends

from marketplan.dependencies import get_current_user
from marketplan.schemas import MeOut
from marketplan.services.plan_service import strategy_limit
from marketplan.services.strategy_repository import StrategyRepository

router = APIRouter(tags=["account"])

@router.get("/me", response_model=MeOut)
def me(user = Depends(get_current_user)):
    return MeOut(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        plan=user.plan,
        is_admin=bool(user.is_admin),
        last_login_at=user.last_login_at,
        strategies_used=StrategyRepository().count_owned(user.id),
        strategies_limit=strategy_limit(user.plan),
    )
