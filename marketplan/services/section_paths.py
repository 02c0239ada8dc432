# marketplan/services/section_paths.py
"""
Adressage des sections d'un plan par clé pointée ("avant.marcheCible").

Les 9 clés publiques sont connues à l'avance (SECTION_KEYS) : les appelants
doivent passer par `is_section_key` avant d'écrire, ce qui empêche de créer
une clé inattendue dans le document.
"""
from typing import Any, Dict, Optional

from marketplan.schemas import GeneratedStrategy

SECTION_KEYS = tuple(
    f"{phase}.{section}"
    for phase, phase_field in GeneratedStrategy.model_fields.items()
    for section in phase_field.annotation.model_fields
)

def is_section_key(path: str) -> bool:
    return path in SECTION_KEYS

def get_path(document: Dict[str, Any], path: str) -> Optional[Any]:
    """Descend segment par segment ; None dès qu'un segment manque. Ne lève jamais."""
    current: Any = document
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current

def set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    """
    Écrit `value` au chemin donné. Les segments intermédiaires absents (ou non
    objets) sont créés vides. Le dernier segment est remplacé tel quel :
    écrasement complet, jamais de fusion.
    """
    keys = path.split(".")
    last = keys.pop()
    if not last:
        raise ValueError(f"Clé de section invalide: {path!r}")
    target = document
    for key in keys:
        if not isinstance(target.get(key), dict):
            target[key] = {}
        target = target[key]
    target[last] = value
