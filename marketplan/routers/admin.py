# marketplan/routers/admin.py
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import func
from sqlmodel import select

from marketplan.db import get_session
from marketplan.dependencies import require_admin
from marketplan.models import Strategy, User
from marketplan.services.plan_service import PLANS

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/users")
def list_users(_: User = Depends(require_admin)):
    with get_session() as s:
        rows = s.exec(select(User).order_by(User.created_at.desc())).all()
        counts = dict(s.exec(
            select(Strategy.user_id, func.count()).group_by(Strategy.user_id)
        ).all())
    return [
        {
            "id": u.id, "email": u.email, "full_name": u.full_name, "plan": u.plan,
            "is_admin": u.is_admin,
            "is_active": u.is_active,
            "last_login_at": u.last_login_at.isoformat() if u.last_login_at else None,
            "strategies": counts.get(u.id, 0),
            "created_at": u.created_at.isoformat(),
        }
        for u in rows
    ]

class AdminUserPatch(BaseModel):
    plan: str | None = None
    is_admin: bool | None = None
    is_active: bool | None = None

@router.patch("/users/{user_id}")
def update_user(user_id: int, patch: AdminUserPatch, _: User = Depends(require_admin)):
    if patch.plan is not None and patch.plan not in PLANS:
        raise HTTPException(400, f"Plan inconnu: {patch.plan}")
    with get_session() as s:
        u = s.get(User, user_id)
        if not u:
            raise HTTPException(404, "User introuvable")
        for k, v in patch.model_dump(exclude_unset=True).items():
            if v is not None:
                setattr(u, k, v)
        s.add(u); s.commit()
    return {"ok": True}
