# marketplan/services/strategy_service.py
import copy
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from marketplan.config import settings
from marketplan.errors import (
    InvalidInstructionError, NotFoundError, QuotaExceededError, SchemaError,
)
from marketplan.models import Strategy
from marketplan.schemas import BusinessInfo
from marketplan.services.plan_service import get_plan
from marketplan.services.section_paths import get_path, is_section_key, set_path
from marketplan.services.strategy_normalizer import has_plan_shape, normalize_section, normalize_strategy
from marketplan.services.strategy_prompts import (
    build_full_plan_prompt, build_improve_prompt, build_regenerate_prompt,
)

log = logging.getLogger(__name__)


class JsonCompleter(Protocol):
    async def complete_as_json(self, prompt: str) -> Any: ...


class StrategyStore(Protocol):
    def find_owned(self, user_id: int, strategy_id: int) -> Optional[Strategy]: ...
    def count_owned(self, user_id: int) -> int: ...
    def list_owned(self, user_id: int, page: int, limit: int) -> Tuple[List[Strategy], int]: ...
    def save(self, strategy: Strategy) -> Strategy: ...
    def delete(self, user_id: int, strategy_id: int) -> bool: ...


PromptBuilder = Callable[[BusinessInfo, str, Optional[str], Any], str]


class StrategyService:
    """
    Cas d'usage autour des stratégies : génération complète (avec quota),
    régénération / amélioration / édition directe d'une section.
    Chaque opération réussit entièrement ou échoue sans rien persister.
    """

    def __init__(self, store: StrategyStore, ai: JsonCompleter,
                 max_instruction_length: int = settings.MAX_INSTRUCTION_LENGTH):
        self.store = store
        self.ai = ai
        self.max_instruction_length = max_instruction_length

    # ---------- Génération complète ----------
    async def generate_full_strategy(self, user_id: int, plan: Optional[str], info: BusinessInfo) -> Strategy:
        # Quota vérifié AVANT tout appel IA
        tier = get_plan(plan)
        used = self.store.count_owned(user_id)
        if tier.max_strategies is not None and used >= tier.max_strategies:
            raise QuotaExceededError(
                f"Limite du plan {tier.name} atteinte ({tier.max_strategies} stratégies maximum). "
                "Veuillez passer à un plan supérieur."
            )

        raw = await self.ai.complete_as_json(build_full_plan_prompt(info))
        if not has_plan_shape(raw):
            raise SchemaError("Format de réponse IA invalide : phases avant/pendant/apres attendues")

        generated = normalize_strategy(raw)
        saved = self.store.save(Strategy(
            user_id=user_id,
            business_info=info.model_dump(),
            generated_strategy=generated.model_dump(),
        ))
        log.info("Stratégie %s générée pour user=%s (%s/%s)", saved.id, user_id, used + 1,
                 tier.max_strategies if tier.max_strategies is not None else "∞")
        return saved

    # ---------- Lecture / suppression ----------
    def list_strategies(self, user_id: int, page: int = 1, limit: int = 10) -> Tuple[List[Strategy], int]:
        return self.store.list_owned(user_id, page, limit)

    def get_strategy(self, user_id: int, strategy_id: int) -> Strategy:
        strategy = self.store.find_owned(user_id, strategy_id)
        if strategy is None:
            raise NotFoundError("Stratégie non trouvée")
        return strategy

    def delete_strategy(self, user_id: int, strategy_id: int) -> None:
        if not self.store.delete(user_id, strategy_id):
            raise NotFoundError("Stratégie non trouvée ou déjà supprimée")
        log.info("Stratégie %s supprimée (user=%s)", strategy_id, user_id)

    # ---------- Mutation de section ----------
    def _load_section(self, user_id: int, strategy_id: int, section_key: str) -> Tuple[Strategy, Any]:
        strategy = self.get_strategy(user_id, strategy_id)
        existing = get_path(strategy.generated_strategy, section_key) if is_section_key(section_key) else None
        if existing is None:
            raise NotFoundError(f'Section "{section_key}" non trouvée')
        return strategy, existing

    def _check_instruction(self, instruction: Optional[str]) -> Optional[str]:
        if instruction is not None and len(instruction) > self.max_instruction_length:
            raise InvalidInstructionError(
                f"Instruction trop longue ({len(instruction)} caractères, maximum {self.max_instruction_length})"
            )
        return instruction.strip() if instruction and instruction.strip() else None

    def _write_section(self, strategy: Strategy, section_key: str, value: Any) -> Strategy:
        document = copy.deepcopy(strategy.generated_strategy)
        set_path(document, section_key, value)
        strategy.generated_strategy = document
        return self.store.save(strategy)

    async def _rewrite_section(self, user_id: int, strategy_id: int, section_key: str,
                               instruction: Optional[str], build: PromptBuilder) -> Strategy:
        instruction = self._check_instruction(instruction)
        strategy, existing = self._load_section(user_id, strategy_id, section_key)
        info = BusinessInfo.model_validate(strategy.business_info)
        new_section = await self.ai.complete_as_json(build(info, section_key, instruction, existing))
        return self._write_section(strategy, section_key, normalize_section(section_key, new_section))

    async def regenerate_section(self, user_id: int, strategy_id: int, section_key: str,
                                 instruction: Optional[str] = None) -> Strategy:
        saved = await self._rewrite_section(user_id, strategy_id, section_key, instruction, build_regenerate_prompt)
        log.info("Section %s régénérée (stratégie=%s)", section_key, strategy_id)
        return saved

    async def improve_section(self, user_id: int, strategy_id: int, section_key: str,
                              instruction: Optional[str] = None) -> Strategy:
        saved = await self._rewrite_section(user_id, strategy_id, section_key, instruction, build_improve_prompt)
        log.info("Section %s améliorée (stratégie=%s)", section_key, strategy_id)
        return saved

    async def update_section_directly(self, user_id: int, strategy_id: int, section_key: str,
                                      data: Any) -> Strategy:
        strategy, _ = self._load_section(user_id, strategy_id, section_key)
        saved = self._write_section(strategy, section_key, normalize_section(section_key, data))
        log.info("Section %s modifiée manuellement (stratégie=%s)", section_key, strategy_id)
        return saved

