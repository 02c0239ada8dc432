# marketplan/routers/plans.py
from fastapi import APIRouter, HTTPException

from marketplan.schemas import PlanOut
from marketplan.services.plan_service import PLANS, list_plans

router = APIRouter(prefix="/plans", tags=["plans"])

@router.get("", response_model=list[PlanOut])
def get_all_plans():
    return list_plans()

@router.get("/{plan_type}", response_model=PlanOut)
def get_plan_by_type(plan_type: str):
    plan = PLANS.get(plan_type)
    if not plan:
        raise HTTPException(404, "Plan introuvable")
    return plan
