# marketplan/services/ai_service.py
import json
import logging
import re
from typing import Any

import openai
from openai import AsyncOpenAI

from marketplan.config import CompletionConfig
from marketplan.errors import (
    ConfigurationError, MalformedResponseError, TransportError, UpstreamError,
)

log = logging.getLogger(__name__)

_FENCED = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

REPAIR_PROMPT = (
    "Fix JSON and return only valid JSON. The following text should be valid JSON "
    "but it is not. Return ONLY the valid JSON object, no explanation, no markdown:\n\n{reply}"
)

class _Unparseable(Exception):
    pass

def parse_json_reply(text: str) -> Any:
    """
    Parse la réponse brute du modèle.
    - JSON direct (après strip)
    - sinon, contenu d'un bloc ```json ... ``` éventuel
    Lève _Unparseable si rien n'est exploitable. `null` est un JSON valide.
    """
    txt = (text or "").strip()
    try:
        return json.loads(txt)
    except json.JSONDecodeError:
        pass
    m = _FENCED.search(txt)
    if m:
        try:
            return json.loads(m.group(1).strip())
        except json.JSONDecodeError:
            pass
    raise _Unparseable(txt[:80])


class CompletionClient:
    """
    Un appel = un message utilisateur -> un texte. Aucun retry ici.
    """

    def __init__(self, config: CompletionConfig, client: AsyncOpenAI | None = None):
        if not config.base_url or not config.api_key:
            raise ConfigurationError(
                "OPENROUTER_BASE_URL et OPENROUTER_API_KEY sont requis pour le service IA"
            )
        self.config = config
        self._client = client or AsyncOpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            max_retries=0,  # les relances sont à la charge de l'appelant
        )
        log.info("Service IA configuré (model=%s, url=%s)", config.model, config.base_url)

    async def complete(self, prompt: str) -> str:
        log.debug("Appel complétion (model=%s, prompt=%d car.)", self.config.model, len(prompt))
        try:
            resp = await self._client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
            )
        except openai.APIStatusError as e:
            log.error("Service IA en erreur: HTTP %s", e.status_code)
            raise UpstreamError(
                f"Erreur du service IA: {e.status_code}", upstream_status=e.status_code
            ) from e
        except (openai.APIConnectionError, openai.APITimeoutError) as e:
            log.error("Service IA injoignable: %s", e.__class__.__name__)
            raise TransportError("Service IA injoignable, réessayez plus tard") from e
        except openai.APIError as e:
            # réponse illisible par le SDK, etc.
            log.error("Erreur du SDK IA: %s", e.__class__.__name__)
            raise UpstreamError("Réponse inexploitable du service IA") from e

        choices = getattr(resp, "choices", None) or []
        content = choices[0].message.content if choices and choices[0].message else None
        if not content:
            raise UpstreamError("Format de réponse invalide du service IA")

        log.debug("Réponse IA reçue (%d car.)", len(content))
        return content

    async def complete_as_json(self, prompt: str) -> Any:
        """
        Appelle le modèle et parse sa réponse en JSON.
        Si le parse échoue : UNE seule relance demandant au modèle de corriger
        son propre JSON. Deux échecs -> MalformedResponseError (jamais de 3e appel).
        Aucune validation sémantique à ce niveau.
        """
        first = await self.complete(prompt)
        try:
            return parse_json_reply(first)
        except _Unparseable:
            log.warning("Réponse IA non JSON, tentative de réparation")

        second = await self.complete(REPAIR_PROMPT.format(reply=first))
        try:
            return parse_json_reply(second)
        except _Unparseable:
            log.error("Réponse IA toujours invalide après réparation")
            raise MalformedResponseError(
                "Impossible d'obtenir un JSON valide du service IA après une tentative de correction"
            )
