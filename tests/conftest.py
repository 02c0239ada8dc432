"""Shared fixtures for the MarketPlan IA test suite."""

import copy
import os

# Settings are read at import time: configure the environment first.
os.environ.setdefault("OPENROUTER_BASE_URL", "https://openrouter.test/api/v1")
os.environ.setdefault("OPENROUTER_API_KEY", "sk-or-test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from marketplan.models import Strategy
from marketplan.schemas import BusinessInfo


class FakeAI:
    """Scripted stand-in for CompletionClient.complete_as_json."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    async def complete_as_json(self, prompt):
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("unexpected completion call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return copy.deepcopy(reply)

    @property
    def calls(self):
        return len(self.prompts)


class FakeStore:
    """In-memory storage keyed by strategy id."""

    def __init__(self):
        self.items = {}
        self.saves = 0

    def find_owned(self, user_id, strategy_id):
        s = self.items.get(strategy_id)
        return s if s is not None and s.user_id == user_id else None

    def count_owned(self, user_id):
        return sum(1 for s in self.items.values() if s.user_id == user_id)

    def list_owned(self, user_id, page, limit):
        owned = [s for s in self.items.values() if s.user_id == user_id]
        owned.sort(key=lambda s: s.id, reverse=True)
        start = (page - 1) * limit
        return owned[start:start + limit], len(owned)

    def save(self, strategy):
        self.saves += 1
        if strategy.id is None:
            strategy.id = max(self.items, default=0) + 1
        self.items[strategy.id] = strategy
        return strategy

    def delete(self, user_id, strategy_id):
        if self.find_owned(user_id, strategy_id) is None:
            return False
        del self.items[strategy_id]
        return True


@pytest.fixture
def business_info():
    return BusinessInfo(
        businessName="Acme",
        industry="SaaS",
        productOrService="Logiciel de facturation",
        targetAudience="Indépendants et TPE",
        location="Lyon",
        mainObjective="leads",
        tone="professional",
        budget=1500,
    )


@pytest.fixture
def full_plan():
    """A complete, well-formed plan as the model would return it."""
    return {
        "avant": {
            "marcheCible": {
                "persona": "Freelance de 30 ans",
                "besoins": ["Gagner du temps"],
                "problemes": ["Relances manuelles"],
                "comportementDigital": ["LinkedIn quotidien"],
            },
            "messageMarketing": {
                "propositionValeur": "Facturez en 2 clics",
                "messagePrincipal": "Moins d'admin, plus de clients",
                "tonCommunication": "Professionnel",
            },
            "canauxCommunication": {
                "plateformes": ["LinkedIn", "Instagram"],
                "typesContenu": {
                    "instagram": ["Reels"],
                    "tiktok": [],
                    "linkedin": ["Carrousels"],
                    "facebook": [],
                },
            },
        },
        "pendant": {
            "captureProspects": {
                "landingPage": "Page avec démo vidéo",
                "formulaire": "Email + métier",
                "offreIncitative": ["Modèle de facture"],
            },
            "nurturing": {
                "sequenceEmails": ["J0 bienvenue", "J3 cas client"],
                "contenusEducatifs": ["Guide TVA"],
                "relances": ["Relance J7"],
            },
            "conversion": {
                "cta": ["Essai gratuit"],
                "offres": ["-20% la 1re année"],
                "argumentaireVente": ["Conforme 2026"],
            },
        },
        "apres": {
            "experienceClient": {"recommendations": ["Onboarding guidé"]},
            "augmentationValeurClient": {
                "upsell": ["Plan Pro"],
                "crossSell": ["Module devis"],
                "fidelite": ["Remise annuelle"],
            },
            "recommandation": {
                "parrainage": ["1 mois offert"],
                "avisClients": ["Demande d'avis J30"],
                "recompenses": ["Badge ambassadeur"],
            },
        },
    }


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def make_strategy(fake_store, business_info, full_plan):
    """Persist a strategy in the fake store and return it."""

    def _make(user_id=1, plan=None):
        return fake_store.save(Strategy(
            user_id=user_id,
            business_info=business_info.model_dump(),
            generated_strategy=copy.deepcopy(plan if plan is not None else full_plan),
        ))

    return _make


@pytest.fixture
def db_engine(monkeypatch):
    """Isolated in-memory SQLite engine wired into marketplan.db."""
    import marketplan.db as db

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    monkeypatch.setattr(db, "engine", engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
