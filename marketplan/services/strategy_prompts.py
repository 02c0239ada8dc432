# marketplan/services/strategy_prompts.py
"""
Construction des prompts "One Page Marketing Plan".
Fonctions pures : aucune I/O, aucun appel réseau.
"""
import copy
import json
from textwrap import dedent
from typing import Any, Dict, Mapping

from marketplan.schemas import BusinessInfo

MAX_ITEMS_PER_SECTION = 6

DEFAULT_REGENERATE_INSTRUCTION = "Régénérez cette section avec un contenu frais et innovant"
DEFAULT_IMPROVE_INSTRUCTION = "Améliorez cette section en la rendant plus précise et actionnable"

_OBJECTIVES = {
    "leads": "Génération de prospects qualifiés",
    "sales": "Augmentation des ventes directes",
    "awareness": "Accroissement de la notoriété de marque",
    "engagement": "Amélioration de l'engagement client",
}

_TONES = {
    "friendly": "amical et chaleureux",
    "professional": "professionnel et rassurant",
    "luxury": "haut de gamme, élégant",
    "young": "jeune, dynamique et décontracté",
}

# Exemple de structure attendue pour chacune des 9 sections
SECTION_EXAMPLES: Dict[str, Dict[str, Any]] = {
    "avant.marcheCible": {
        "persona": "Description détaillée du persona (âge, profession, besoins, comportements)",
        "besoins": ["Besoin 1", "Besoin 2", "Besoin 3"],
        "problemes": ["Problème 1", "Problème 2", "Problème 3"],
        "comportementDigital": ["Habitude 1", "Habitude 2", "Habitude 3"],
    },
    "avant.messageMarketing": {
        "propositionValeur": "Proposition de valeur unique",
        "messagePrincipal": "Message marketing principal",
        "tonCommunication": "Ton de communication adapté",
    },
    "avant.canauxCommunication": {
        "plateformes": ["Plateforme 1", "Plateforme 2"],
        "typesContenu": {
            "instagram": ["Type 1", "Type 2"],
            "tiktok": ["Type 1", "Type 2"],
            "linkedin": ["Type 1", "Type 2"],
            "facebook": ["Type 1", "Type 2"],
        },
    },
    "pendant.captureProspects": {
        "landingPage": "Description de la landing page",
        "formulaire": "Description du formulaire",
        "offreIncitative": ["Lead magnet 1", "Lead magnet 2"],
    },
    "pendant.nurturing": {
        "sequenceEmails": ["Email 1", "Email 2", "Email 3"],
        "contenusEducatifs": ["Contenu 1", "Contenu 2"],
        "relances": ["Relance 1", "Relance 2"],
    },
    "pendant.conversion": {
        "cta": ["CTA 1", "CTA 2"],
        "offres": ["Offre 1", "Offre 2"],
        "argumentaireVente": ["Argument 1", "Argument 2"],
    },
    "apres.experienceClient": {
        "recommendations": ["Recommandation 1", "Recommandation 2"],
    },
    "apres.augmentationValeurClient": {
        "upsell": ["Stratégie 1", "Stratégie 2"],
        "crossSell": ["Stratégie 1", "Stratégie 2"],
        "fidelite": ["Programme 1", "Programme 2"],
    },
    "apres.recommandation": {
        "parrainage": ["Système 1", "Système 2"],
        "avisClients": ["Stratégie 1", "Stratégie 2"],
        "recompenses": ["Récompense 1", "Récompense 2"],
    },
}


def _or(value: Any, placeholder: str) -> str:
    s = str(value).strip() if value is not None else ""
    return s or placeholder

def _budget_str(budget: float | None) -> str:
    if budget is None:
        return "Budget non spécifié"
    return f"{budget:g}€ par mois"

def business_context(info: BusinessInfo) -> Dict[str, str]:
    """Champs du contexte business prêts à être injectés (jamais vides)."""
    return {
        "company": _or(info.businessName, "l'entreprise"),
        "industry": _or(info.industry, "le secteur d'activité"),
        "products": _or(info.productOrService, "les produits/services"),
        "audience": _or(info.targetAudience, "la clientèle cible"),
        "location": _or(info.location, "zone géographique non précisée"),
        "objective": _OBJECTIVES.get(info.mainObjective, _or(info.mainObjective, "les objectifs commerciaux")),
        "tone": _TONES.get(info.tone, _or(info.tone, "professionnel")),
        "budget": _budget_str(info.budget),
    }

def _dump(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2)

def _full_plan_example(company: str) -> Dict[str, Any]:
    example: Dict[str, Any] = {}
    for path, section in copy.deepcopy(SECTION_EXAMPLES).items():
        phase, key = path.split(".")
        example.setdefault(phase, {})[key] = section
    example["avant"]["marcheCible"]["persona"] = (
        f"Description détaillée du persona type de {company} (âge, profession, besoins, comportements)"
    )
    example["avant"]["messageMarketing"]["propositionValeur"] = (
        f"Proposition de valeur unique claire et attractive pour {company}"
    )
    return example


def build_full_plan_prompt(info: BusinessInfo) -> str:
    ctx = business_context(info)
    return dedent("""\
        En tant qu'expert en stratégie marketing, créez un "One Page Marketing Plan" complet et professionnel pour {company} dans {industry}.

        INFORMATIONS CONTEXTUELLES :
        - Entreprise : {company}
        - Secteur : {industry}
        - Produits/Services : {products}
        - Audience cible : {audience}
        - Localisation : {location}
        - Objectif principal : {objective}
        - Ton souhaité : {tone}
        - Budget : {budget}

        CONSIGNES STRICTES :
        1. Répondez UNIQUEMENT avec un objet JSON valide, sans texte avant ou après
        2. Structure obligatoire : exactement les 3 clés "avant", "pendant", "apres", chacune avec ses 3 sections
        3. Maximum {max_items} éléments concrets par liste
        4. Contenu 100% en français, professionnel et actionnable, sur un ton {tone}
        5. Évitez les généralités, donnez des actions spécifiques

        FORMAT JSON ATTENDU :
        {example}

        Générez maintenant ce plan marketing stratégique complet :""").format(
        max_items=MAX_ITEMS_PER_SECTION,
        example=_dump(_full_plan_example(ctx["company"])),
        **ctx,
    )


def _section_example(section_key: str, existing: Any) -> str:
    example = SECTION_EXAMPLES.get(section_key)
    if example is None and isinstance(existing, Mapping):
        # mêmes clés que la section actuelle
        example = {k: "..." for k in existing}
    return _dump(example if example is not None else {})


def build_regenerate_prompt(
    info: BusinessInfo,
    section_key: str,
    instruction: str | None,
    existing_section: Any,
) -> str:
    ctx = business_context(info)
    return dedent("""\
        En tant qu'expert en stratégie marketing, régénérez complètement la section "{section_key}" du plan marketing pour {company} dans {industry}.

        CONTEXTE ENTREPRISE :
        - Entreprise : {company}
        - Secteur : {industry}
        - Audience : {audience}
        - Objectif principal : {objective}
        - Ton souhaité : {tone}

        SECTION ACTUELLE À REMPLACER :
        {existing}

        INSTRUCTION SPÉCIFIQUE :
        {instruction}

        CONSIGNES STRICTES :
        1. Répondez UNIQUEMENT avec le JSON valide de la section demandée, sans texte autour
        2. Conservez EXACTEMENT les mêmes noms de champs que la section actuelle
        3. Maximum {max_items} éléments par liste
        4. Contenu 100% en français, concret et professionnel
        5. Évitez de reproduire le contenu existant
        6. Adaptez le contenu au secteur {industry}

        FORMAT JSON ATTENDU pour {section_key} :
        {example}

        Générez la nouvelle section maintenant :""").format(
        section_key=section_key,
        existing=_dump(existing_section),
        instruction=instruction or DEFAULT_REGENERATE_INSTRUCTION,
        example=_section_example(section_key, existing_section),
        max_items=MAX_ITEMS_PER_SECTION,
        **ctx,
    )


def build_improve_prompt(
    info: BusinessInfo,
    section_key: str,
    instruction: str | None,
    existing_section: Any,
) -> str:
    ctx = business_context(info)
    return dedent("""\
        En tant qu'expert en stratégie marketing, améliorez la section "{section_key}" du plan marketing pour {company} dans {industry}.

        CONTEXTE ENTREPRISE :
        - Entreprise : {company}
        - Secteur : {industry}
        - Audience : {audience}
        - Objectif principal : {objective}
        - Ton souhaité : {tone}

        SECTION ACTUELLE À AMÉLIORER :
        {existing}

        INSTRUCTION D'AMÉLIORATION :
        {instruction}

        CONSIGNES STRICTES :
        1. Répondez UNIQUEMENT avec le JSON valide de la section améliorée, sans texte autour
        2. CONSERVEZ la logique et l'orientation générale de la section actuelle
        3. Conservez EXACTEMENT les mêmes noms de champs que la section actuelle
        4. Améliorez la précision, la clarté et l'impact plutôt que de changer le fond
        5. Maximum {max_items} éléments par liste
        6. Contenu 100% en français, spécifique et actionnable

        FORMAT JSON ATTENDU pour {section_key} améliorée :
        {example}

        Générez la section améliorée maintenant :""").format(
        section_key=section_key,
        existing=_dump(existing_section),
        instruction=instruction or DEFAULT_IMPROVE_INSTRUCTION,
        example=_section_example(section_key, existing_section),
        max_items=MAX_ITEMS_PER_SECTION,
        **ctx,
    )
