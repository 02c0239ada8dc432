"""Tests for the SQLModel-backed strategy repository."""

import copy
from datetime import timedelta, timezone

import pytest

from marketplan.db import get_session
from marketplan.models import Strategy, User, utcnow
from marketplan.services.strategy_repository import StrategyRepository
from marketplan.services.user_service import create_user


@pytest.fixture
def repo(db_engine):
    return StrategyRepository()


@pytest.fixture
def users(db_engine):
    with get_session() as s:
        alice = User(email="alice@example.com", hashed_password="x")
        bob = User(email="bob@example.com", hashed_password="x")
        s.add_all([alice, bob])
        s.commit()
        s.refresh(alice)
        s.refresh(bob)
    return alice, bob


def _new(user_id, business_info, full_plan):
    return Strategy(
        user_id=user_id,
        business_info=business_info.model_dump(),
        generated_strategy=copy.deepcopy(full_plan),
    )


def test_save_then_find_owned(repo, users, business_info, full_plan):
    alice, bob = users
    saved = repo.save(_new(alice.id, business_info, full_plan))

    assert saved.id is not None
    found = repo.find_owned(alice.id, saved.id)
    assert found.generated_strategy == full_plan
    assert found.business_info["businessName"] == "Acme"
    assert repo.find_owned(bob.id, saved.id) is None


def test_count_and_list_are_owner_scoped(repo, users, business_info, full_plan):
    alice, bob = users
    ids = [repo.save(_new(alice.id, business_info, full_plan)).id for _ in range(3)]
    repo.save(_new(bob.id, business_info, full_plan))

    assert repo.count_owned(alice.id) == 3
    assert repo.count_owned(bob.id) == 1

    first_page, total = repo.list_owned(alice.id, page=1, limit=2)
    second_page, _ = repo.list_owned(alice.id, page=2, limit=2)
    assert total == 3
    assert [s.id for s in first_page] == [ids[2], ids[1]]
    assert [s.id for s in second_page] == [ids[0]]


def test_save_overwrites_mutated_document(repo, users, business_info, full_plan):
    alice, _ = users
    saved = repo.save(_new(alice.id, business_info, full_plan))

    doc = copy.deepcopy(saved.generated_strategy)
    doc["apres"]["experienceClient"] = {"recommendations": ["Appel J+7"]}
    saved.generated_strategy = doc
    repo.save(saved)

    reloaded = repo.find_owned(alice.id, saved.id)
    assert reloaded.generated_strategy["apres"]["experienceClient"] == {"recommendations": ["Appel J+7"]}
    assert reloaded.generated_strategy["avant"] == full_plan["avant"]
    assert reloaded.updated_at >= reloaded.created_at


def test_save_strips_control_characters(repo, users, business_info, full_plan):
    alice, _ = users
    plan = copy.deepcopy(full_plan)
    plan["avant"]["marcheCible"]["persona"] = "Free\x00lance\r\nLyon"
    saved = repo.save(Strategy(
        user_id=alice.id, business_info=business_info.model_dump(), generated_strategy=plan,
    ))

    persona = repo.find_owned(alice.id, saved.id).generated_strategy["avant"]["marcheCible"]["persona"]
    assert persona == "Freelance\nLyon"


def test_delete_is_owner_scoped(repo, users, business_info, full_plan):
    alice, bob = users
    saved = repo.save(_new(alice.id, business_info, full_plan))

    assert repo.delete(bob.id, saved.id) is False
    assert repo.delete(alice.id, saved.id) is True
    assert repo.find_owned(alice.id, saved.id) is None
    assert repo.delete(alice.id, saved.id) is False


def test_timestamps_are_timezone_aware(business_info, full_plan):
    s = _new(1, business_info, full_plan)
    assert s.created_at.tzinfo is not None
    assert s.updated_at.utcoffset() == timedelta(0)
    assert utcnow().tzinfo is timezone.utc


def test_save_stamps_updated_at_and_keeps_created_at(repo, users, business_info, full_plan):
    alice, _ = users
    saved = repo.save(_new(alice.id, business_info, full_plan))
    created = saved.created_at

    saved.generated_strategy["avant"]["marcheCible"]["persona"] = "Autre"
    again = repo.save(saved)

    assert again.created_at == created
    assert again.updated_at >= again.created_at


def test_last_login_is_stamped_on_user_creation(db_engine):
    user = create_user("carol@example.com", "motdepasse123")
    assert user.id is not None
    assert user.last_login_at is not None
