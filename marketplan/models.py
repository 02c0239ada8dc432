# marketplan/models.py
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, DateTime, String, JSON
from sqlalchemy.dialects.postgresql import JSONB

# JSONB en prod (Postgres), JSON générique ailleurs (SQLite en dev/tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(
        sa_column=Column(String, unique=True, index=True, nullable=False)
    )
    hashed_password: str = Field(nullable=False)
    full_name: Optional[str] = None
    plan: str = Field(default="free", nullable=False)  # "free" | "pro" | "business"
    is_admin: bool = Field(default=False, nullable=False)
    is_active: bool = Field(default=True, nullable=False)
    last_login_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

class Strategy(SQLModel, table=True):
    __tablename__ = "strategies"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True, foreign_key="users.id")
    # Contexte business figé à la génération (BusinessInfo sérialisé)
    business_info: Dict[str, Any] = Field(sa_column=Column(JSONType, nullable=False))
    # Plan en 3 phases / 9 sections, toujours normalisé
    generated_strategy: Dict[str, Any] = Field(sa_column=Column(JSONType, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
