# marketplan/services/strategy_repository.py
import copy
import re
from typing import Any, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import select

from marketplan.db import get_session
from marketplan.models import Strategy, utcnow

# Retire les caractères de contrôle interdits par Postgres (\x00 notamment)
# On conserve \n, \r, \t pour ne pas casser les retours à la ligne.
_CONTROL_CHARS_RE = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

def _sanitize_for_json(obj: Any) -> Any:
    if isinstance(obj, str):
        s = obj.replace("\r\n", "\n").replace("\r", "\n")
        return _CONTROL_CHARS_RE.sub("", s)
    if isinstance(obj, list):
        return [_sanitize_for_json(x) for x in obj]
    if isinstance(obj, dict):
        return {_sanitize_for_json(str(k)): _sanitize_for_json(v) for k, v in obj.items()}
    return obj


class StrategyRepository:
    """
    Accès aux stratégies. La propriété est toujours dans le prédicat de la
    requête : un document d'un autre utilisateur est simplement "introuvable".
    """

    def find_owned(self, user_id: int, strategy_id: int) -> Optional[Strategy]:
        with get_session() as s:
            return s.exec(
                select(Strategy).where(Strategy.id == strategy_id, Strategy.user_id == user_id)
            ).first()

    def count_owned(self, user_id: int) -> int:
        with get_session() as s:
            return s.exec(
                select(func.count()).select_from(Strategy).where(Strategy.user_id == user_id)
            ).one()

    def list_owned(self, user_id: int, page: int = 1, limit: int = 10) -> Tuple[List[Strategy], int]:
        page = max(page, 1)
        with get_session() as s:
            items = s.exec(
                select(Strategy)
                .where(Strategy.user_id == user_id)
                .order_by(Strategy.created_at.desc(), Strategy.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).all()
            total = s.exec(
                select(func.count()).select_from(Strategy).where(Strategy.user_id == user_id)
            ).one()
        return list(items), total

    def save(self, strategy: Strategy) -> Strategy:
        """Insert ou écrasement complet (dernier écrit gagne, pas de verrou)."""
        # copie profonde : SQLAlchemy ne détecte pas les mutations en place du JSON
        strategy.business_info = _sanitize_for_json(copy.deepcopy(strategy.business_info))
        strategy.generated_strategy = _sanitize_for_json(copy.deepcopy(strategy.generated_strategy))
        strategy.updated_at = utcnow()
        with get_session() as s:
            merged = s.merge(strategy)
            flag_modified(merged, "generated_strategy")
            s.commit()
            s.refresh(merged)
        return merged

    def delete(self, user_id: int, strategy_id: int) -> bool:
        with get_session() as s:
            obj = s.exec(
                select(Strategy).where(Strategy.id == strategy_id, Strategy.user_id == user_id)
            ).first()
            if not obj:
                return False
            s.delete(obj)
            s.commit()
        return True
