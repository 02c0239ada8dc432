# marketplan/services/plan_service.py
from typing import Dict, List, Optional

from marketplan.schemas import PlanOut

DEFAULT_PLAN = "free"

# Catalogue statique des offres. max_strategies=None -> illimité
PLANS: Dict[str, PlanOut] = {
    "free": PlanOut(
        type="free",
        name="Free",
        description="Parfait pour débuter avec les fonctionnalités de base",
        max_strategies=3,
        highlights=["3 stratégies", "Régénération et amélioration par section", "Support communautaire"],
    ),
    "pro": PlanOut(
        type="pro",
        name="Pro",
        description="Pour les professionnels qui ont besoin de plus de fonctionnalités",
        max_strategies=25,
        highlights=["25 stratégies", "Support prioritaire"],
    ),
    "business": PlanOut(
        type="business",
        name="Business",
        description="Solution complète pour les équipes et entreprises",
        max_strategies=None,
        highlights=["Stratégies illimitées", "Support dédié"],
    ),
}

def list_plans() -> List[PlanOut]:
    return list(PLANS.values())

def get_plan(plan_type: Optional[str]) -> PlanOut:
    """Plan inconnu ou absent -> plan gratuit."""
    return PLANS.get(plan_type or DEFAULT_PLAN, PLANS[DEFAULT_PLAN])

def strategy_limit(plan_type: Optional[str]) -> Optional[int]:
    return get_plan(plan_type).max_strategies
