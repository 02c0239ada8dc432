# marketplan/errors.py
"""
Taxonomie des erreurs métier. Chaque erreur porte un message lisible et le
code HTTP sous lequel elle est rendue par le handler global (voir main.py).
"""


class MarketPlanError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(MarketPlanError):
    """Configuration absente ou invalide : fatale au démarrage."""
    status_code = 500


class TransportError(MarketPlanError):
    """Timeout, DNS, connexion coupée vers le service de complétion."""
    status_code = 502


class UpstreamError(MarketPlanError):
    """Réponse non-2xx (ou sans contenu) du service de complétion."""
    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class MalformedResponseError(MarketPlanError):
    """Réponse toujours non-JSON après la tentative de réparation."""
    status_code = 502


class SchemaError(MarketPlanError):
    """JSON valide mais qui n'a pas la forme d'un plan marketing."""
    status_code = 502


class QuotaExceededError(MarketPlanError):
    status_code = 403


class NotFoundError(MarketPlanError):
    status_code = 404


class InvalidInstructionError(MarketPlanError):
    status_code = 422
