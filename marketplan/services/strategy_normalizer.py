# marketplan/services/strategy_normalizer.py
import logging
from typing import Any, Dict, Type, get_origin

from pydantic import BaseModel

from marketplan.errors import SchemaError
from marketplan.schemas import GeneratedStrategy

log = logging.getLogger(__name__)

PHASES = ("avant", "pendant", "apres")

def has_plan_shape(raw: Any) -> bool:
    """Vérif rapide : objet JSON avec les 3 phases présentes (non nulles, {} accepté)."""
    return isinstance(raw, dict) and all(raw.get(p) is not None for p in PHASES)

def _coerce(model: Type[BaseModel], raw: Any) -> Dict[str, Any]:
    data = raw if isinstance(raw, dict) else {}
    out: Dict[str, Any] = {}
    for name, field in model.model_fields.items():
        value = data.get(name)
        ann = field.annotation
        if isinstance(ann, type) and issubclass(ann, BaseModel):
            out[name] = _coerce(ann, value)
        elif get_origin(ann) is list:
            # éléments non vérifiés : on garde ce que le modèle a renvoyé
            out[name] = value if isinstance(value, list) else []
        else:
            out[name] = value if isinstance(value, str) else ""
    return out

def normalize_strategy(raw: Any) -> GeneratedStrategy:
    """
    Ramène la réponse IA au schéma fixe 3 phases / 9 sections.
    - pas un objet, ou aucune des 3 phases -> SchemaError
    - sinon : champ texte absent/non-str -> "", champ liste absent/non-list -> []
    On dégrade en plan partiellement vide plutôt que de bloquer l'utilisateur.
    """
    if not isinstance(raw, dict) or not any(p in raw for p in PHASES):
        raise SchemaError("La réponse IA n'a pas la forme d'un plan marketing")

    missing = [p for p in PHASES if not isinstance(raw.get(p), dict)]
    if missing:
        log.info("Phases absentes ou invalides complétées à vide: %s", missing)

    return GeneratedStrategy.model_validate(_coerce(GeneratedStrategy, raw))

def section_model(section_key: str) -> Type[BaseModel]:
    """Modèle pydantic d'une section, ex. "pendant.nurturing" -> Nurturing."""
    phase, name = section_key.split(".")
    return GeneratedStrategy.model_fields[phase].annotation.model_fields[name].annotation

def normalize_section(section_key: str, raw: Any) -> Dict[str, Any]:
    """
    Même règles que normalize_strategy, appliquées à une seule section.
    Une réponse qui n'est pas un objet (null, liste, nombre...) est refusée :
    elle effacerait la section.
    """
    if not isinstance(raw, dict):
        raise SchemaError(f'La section "{section_key}" doit être un objet JSON')
    return _coerce(section_model(section_key), raw)
