# marketplan/schemas.py
from datetime import datetime
from enum import Enum
from typing import Optional, List, Any, Dict

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from marketplan.config import settings

class MainObjective(str, Enum):
    LEADS = "leads"
    SALES = "sales"
    AWARENESS = "awareness"
    ENGAGEMENT = "engagement"

class Tone(str, Enum):
    FRIENDLY = "friendly"
    PROFESSIONAL = "professional"
    LUXURY = "luxury"
    YOUNG = "young"

class BusinessInfo(BaseModel):
    """Contexte business d'un plan : créé une fois, jamais modifié."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    businessName: str = Field(min_length=1)
    industry: str = Field(min_length=1)
    productOrService: str = Field(min_length=1)
    targetAudience: str = Field(min_length=1)
    location: str = Field(min_length=1)
    mainObjective: MainObjective
    tone: Tone
    budget: Optional[float] = Field(default=None, ge=0)

# ---------- Sections du plan ----------
# Les éléments de liste ne sont pas typés : la normalisation laisse passer
# tel quel ce que le modèle a renvoyé.
class MarcheCible(BaseModel):
    persona: str = ""
    besoins: List[Any] = []
    problemes: List[Any] = []
    comportementDigital: List[Any] = []

class MessageMarketing(BaseModel):
    propositionValeur: str = ""
    messagePrincipal: str = ""
    tonCommunication: str = ""

class TypesContenu(BaseModel):
    instagram: List[Any] = []
    tiktok: List[Any] = []
    linkedin: List[Any] = []
    facebook: List[Any] = []

class CanauxCommunication(BaseModel):
    plateformes: List[Any] = []
    typesContenu: TypesContenu = TypesContenu()

class CaptureProspects(BaseModel):
    landingPage: str = ""
    formulaire: str = ""
    offreIncitative: List[Any] = []

class Nurturing(BaseModel):
    sequenceEmails: List[Any] = []
    contenusEducatifs: List[Any] = []
    relances: List[Any] = []

class Conversion(BaseModel):
    cta: List[Any] = []
    offres: List[Any] = []
    argumentaireVente: List[Any] = []

class ExperienceClient(BaseModel):
    recommendations: List[Any] = []

class AugmentationValeurClient(BaseModel):
    upsell: List[Any] = []
    crossSell: List[Any] = []
    fidelite: List[Any] = []

class Recommandation(BaseModel):
    parrainage: List[Any] = []
    avisClients: List[Any] = []
    recompenses: List[Any] = []

class Avant(BaseModel):
    marcheCible: MarcheCible = MarcheCible()
    messageMarketing: MessageMarketing = MessageMarketing()
    canauxCommunication: CanauxCommunication = CanauxCommunication()

class Pendant(BaseModel):
    captureProspects: CaptureProspects = CaptureProspects()
    nurturing: Nurturing = Nurturing()
    conversion: Conversion = Conversion()

class Apres(BaseModel):
    experienceClient: ExperienceClient = ExperienceClient()
    augmentationValeurClient: AugmentationValeurClient = AugmentationValeurClient()
    recommandation: Recommandation = Recommandation()

class GeneratedStrategy(BaseModel):
    avant: Avant = Avant()
    pendant: Pendant = Pendant()
    apres: Apres = Apres()

# ---------- Requêtes ----------
class RegenerateSectionRequest(BaseModel):
    sectionKey: str
    instruction: Optional[str] = Field(default=None, max_length=settings.MAX_INSTRUCTION_LENGTH)

class ImproveSectionRequest(BaseModel):
    sectionKey: str
    instruction: Optional[str] = Field(default=None, max_length=settings.MAX_INSTRUCTION_LENGTH)

class UpdateSectionRequest(BaseModel):
    sectionKey: str
    data: Dict[str, Any]

# ---------- Réponses ----------
class StrategyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    business_info: Dict[str, Any]
    # Dict et non GeneratedStrategy : une mise à jour directe peut poser
    # une section dont les champs diffèrent du schéma de référence.
    generated_strategy: Dict[str, Any]
    created_at: datetime
    updated_at: datetime

class StrategyListOut(BaseModel):
    strategies: List[StrategyOut]
    total: int
    page: int
    limit: int

class PlanOut(BaseModel):
    type: str
    name: str
    description: str
    max_strategies: Optional[int]  # None = illimité
    highlights: List[str]

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: Optional[str] = None

class MeOut(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    plan: str
    is_admin: bool = False
    last_login_at: Optional[datetime] = None
    strategies_used: int = 0
    strategies_limit: Optional[int] = None

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: Optional[str] = None
    plan: str
    is_active: bool = True
    last_login_at: Optional[datetime] = None

class RegisterOut(Token):
    user: UserPublic
