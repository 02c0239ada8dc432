# marketplan/routers/strategies.py
from fastapi import APIRouter, Depends, Query, Response, status

from marketplan.dependencies import get_current_user, get_strategy_service
from marketplan.schemas import (
    BusinessInfo, ImproveSectionRequest, RegenerateSectionRequest,
    StrategyListOut, StrategyOut, UpdateSectionRequest,
)
from marketplan.services.strategy_service import StrategyService

router = APIRouter(prefix="/strategies", tags=["strategies"])

# Les erreurs métier (quota, introuvable, IA...) remontent telles quelles :
# le handler global de main.py les rend en JSON.

@router.post("/generate-full", response_model=StrategyOut, status_code=201)
async def generate_full(
    info: BusinessInfo,
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    return await service.generate_full_strategy(user.id, user.plan, info)

@router.get("", response_model=StrategyListOut)
def list_strategies(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    items, total = service.list_strategies(user.id, page, limit)
    return StrategyListOut(
        strategies=[StrategyOut.model_validate(s) for s in items],
        total=total, page=page, limit=limit,
    )

@router.get("/{strategy_id}", response_model=StrategyOut)
def get_strategy(
    strategy_id: int,
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    return service.get_strategy(user.id, strategy_id)

@router.delete("/{strategy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_strategy(
    strategy_id: int,
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    service.delete_strategy(user.id, strategy_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{strategy_id}/regenerate-section", response_model=StrategyOut)
async def regenerate_section(
    strategy_id: int,
    body: RegenerateSectionRequest,
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    return await service.regenerate_section(user.id, strategy_id, body.sectionKey, body.instruction)

@router.post("/{strategy_id}/improve-section", response_model=StrategyOut)
async def improve_section(
    strategy_id: int,
    body: ImproveSectionRequest,
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    return await service.improve_section(user.id, strategy_id, body.sectionKey, body.instruction)

@router.patch("/{strategy_id}/update-section", response_model=StrategyOut)
async def update_section(
    strategy_id: int,
    body: UpdateSectionRequest,
    user=Depends(get_current_user),
    service: StrategyService = Depends(get_strategy_service),
):
    return await service.update_section_directly(user.id, strategy_id, body.sectionKey, body.data)
