"""Pytest fixtures: seeded SQLite stores and a TestClient bound to the API."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, insert

from nest_admin.apis.models import AdminPrincipal
from nest_admin.config import app_cfg
from nest_admin.constants import LogType
from nest_admin.db.base import MembershipBase, WorldBase
from nest_admin.db.accounts.models import Account
from nest_admin.db.characters.models import Character, Item
from nest_admin.db.logs.models import GameLog

BASE_DATE = datetime(2024, 1, 1, 12, 0, 0)

ADMIN = AdminPrincipal(
    id="113620427151234567890",
    provider="google",
    email="admin@example.com",
    displayName="Test Admin",
    avatar="https://lh3.googleusercontent.com/a/test",
)


def build_accounts() -> list[dict]:
    accounts = [
        {
            "AccountName": f"Player{i:02d}",
            # pairs of accounts share a CreateDate so the tie-breaker matters
            "CreateDate": BASE_DATE + timedelta(days=i // 2),
            "LastLoginDate": BASE_DATE + timedelta(days=30 + i),
            "Cash": i * 100,
        }
        for i in range(1, 26)
    ]
    accounts += [
        {"AccountName": "DragonSlayer99", "CreateDate": BASE_DATE - timedelta(days=10),
         "LastLoginDate": BASE_DATE, "Cash": 15000},
        {"AccountName": "ArcherQueen", "CreateDate": BASE_DATE - timedelta(days=9),
         "LastLoginDate": BASE_DATE, "Cash": 22000},
        {"AccountName": "Percent%Guy", "CreateDate": BASE_DATE - timedelta(days=8),
         "LastLoginDate": None, "Cash": 0},
        {"AccountName": "PercentXGuy", "CreateDate": BASE_DATE - timedelta(days=7),
         "LastLoginDate": None, "Cash": 0},
    ]
    return accounts


def build_characters() -> list[dict]:
    named = [
        (1, "ShadowBlade", "DragonSlayer99", 7, 95, 1),
        (2, "HolyLight", "DragonSlayer99", 4, 95, 1),
        (3, "FireStorm", "ArcherQueen", 3, 93, 0),
        (4, "shadowfang", "ArcherQueen", 6, 90, 0),
    ]
    characters = [
        {
            "CharacterID": cid,
            "CharacterName": name,
            "AccountName": account,
            "CharacterClass": cls,
            "CharacterLevel": level,
            "CurHP": 400000,
            "CurMP": 120000,
            "Money": 1000000,
            "CreateDate": BASE_DATE,
            "LastLoginDate": BASE_DATE + timedelta(days=1),
            "LoginStatus": online,
        }
        for cid, name, account, cls, level, online in named
    ]
    for i in range(5, 31):
        characters.append({
            "CharacterID": i,
            "CharacterName": f"Hero{i:02d}",
            "AccountName": f"Player{i - 4:02d}",
            "CharacterClass": (i % 10) + 1,
            "CharacterLevel": 50 + (i % 10),
            "CurHP": 1000 * i,
            "CurMP": 500 * i,
            "Money": 10 * i,
            "CreateDate": BASE_DATE + timedelta(days=i),
            "LastLoginDate": None,
            "LoginStatus": 1 if i % 4 == 0 else 0,
        })
    return characters


def build_items() -> list[dict]:
    slots = [5, 0, 3, 1, 4, 2]
    return [
        {
            "ItemID": 100 + n,
            "OwnerID": 1,
            "ItemName": f"Item in slot {slot}",
            "Quantity": 1,
            "EnhanceLevel": slot * 2,
            "SlotNo": slot,
        }
        for n, slot in enumerate(slots)
    ] + [
        {"ItemID": 200, "OwnerID": 2, "ItemName": "Dragon Jade", "Quantity": 3, "EnhanceLevel": 0, "SlotNo": 0},
    ]


def build_logs() -> list[dict]:
    log_types = [log_type.value for log_type in LogType]
    return [
        {
            "LogID": i,
            "LogType": log_types[i % len(log_types)],
            "LogMessage": f"Event {i}",
            "CharacterName": "ShadowBlade" if i % 2 else "HolyLight",
            "LogDate": BASE_DATE + timedelta(minutes=i // 3),
        }
        for i in range(1, 61)
    ]


@pytest.fixture
def seed_data() -> dict:
    return {
        "accounts": build_accounts(),
        "characters": build_characters(),
        "items": build_items(),
        "logs": build_logs(),
    }


@pytest.fixture
def database_urls(tmp_path, seed_data) -> dict:
    """Create and seed the membership and world SQLite files; return async URLs."""
    membership_path = tmp_path / "membership.db"
    world_path = tmp_path / "world.db"

    membership_engine = create_engine(f"sqlite:///{membership_path}")
    MembershipBase.metadata.create_all(membership_engine)
    with membership_engine.begin() as conn:
        conn.execute(insert(Account), seed_data["accounts"])
    membership_engine.dispose()

    world_engine = create_engine(f"sqlite:///{world_path}")
    WorldBase.metadata.create_all(world_engine)
    with world_engine.begin() as conn:
        conn.execute(insert(Character), seed_data["characters"])
        conn.execute(insert(Item), seed_data["items"])
        conn.execute(insert(GameLog), seed_data["logs"])
    world_engine.dispose()

    return {
        "membership": f"sqlite+aiosqlite:///{membership_path}",
        "world": f"sqlite+aiosqlite:///{world_path}",
    }


@pytest.fixture
def configure_app(monkeypatch, database_urls):
    """Point the app configuration at the seeded stores with both providers enabled."""
    monkeypatch.setattr(app_cfg, "MEMBERSHIP_DATABASE_URL", database_urls["membership"])
    monkeypatch.setattr(app_cfg, "WORLD_DATABASE_URL", database_urls["world"])
    monkeypatch.setattr(app_cfg, "ALLOWED_ADMINS", "")
    monkeypatch.setattr(app_cfg, "GOOGLE_CLIENT_ID", "google-client")
    monkeypatch.setattr(app_cfg, "GOOGLE_CLIENT_SECRET", "google-secret")
    monkeypatch.setattr(app_cfg, "DISCORD_CLIENT_ID", "discord-client")
    monkeypatch.setattr(app_cfg, "DISCORD_CLIENT_SECRET", "discord-secret")
    monkeypatch.setattr(app_cfg, "CLIENT_URL", "http://localhost:3000")
    return monkeypatch


@pytest.fixture
def client(configure_app):
    """Anonymous client; the lifespan runs on enter and exit."""
    from nest_admin.main import api

    with TestClient(api) as test_client:
        yield test_client


def log_in(test_client: TestClient, principal: AdminPrincipal = ADMIN) -> None:
    """Attach a live session for ``principal`` to the client's cookie jar."""
    record = test_client.app.state.session_store.create(principal)
    test_client.cookies.set(
        app_cfg.SESSION_COOKIE_NAME,
        test_client.app.state.cookie_signer.sign(record.session_id)
    )


@pytest.fixture
def admin_client(client):
    log_in(client)
    return client


@pytest.fixture
def login():
    return log_in
