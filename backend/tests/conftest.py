from __future__ import annotations

import os

# Avant tout import de l’app : base SQLite en mémoire, clé API désactivée
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENV"] = "test"
os.environ["API_KEY"] = ""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.schemas.apprenants import ApprenantCreate
from app.schemas.classes import ClasseCreate
from app.schemas.formateurs import FormateurCreate
from app.schemas.formations import FormationCreate
from app.services.apprenant_service import ApprenantService
from app.services.classe_service import ClasseService
from app.services.formateur_service import FormateurService
from app.services.formation_service import FormationService

"""
Fixtures de test.

- Une base SQLite en mémoire par test (StaticPool : une seule connexion partagée),
  schéma créé depuis Base.metadata.
- `db` : session pour les tests de services.
- `client` : httpx.AsyncClient branché sur l’app (transport ASGI), get_db surchargé.
- Fabriques `make_*` : créent des entités valides via les services.
"""


@pytest_asyncio.fixture
async def sessionmaker():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db(sessionmaker):
    async with sessionmaker() as session:
        yield session


@pytest_asyncio.fixture
async def client(sessionmaker):
    async def _get_db():
        async with sessionmaker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def future(days: int = 10) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def apprenant_payload(i: int = 1, **overrides) -> dict:
    data = {"nom": f"Dupont{i}", "prenom": f"Marie{i}", "email": f"marie{i}@example.com", "niveau": "DEBUTANT"}
    data.update(overrides)
    return data


def formateur_payload(i: int = 1, **overrides) -> dict:
    data = {"nom": f"Durand{i}", "prenom": f"Paul{i}", "email": f"paul{i}@example.com", "specialite": "Java"}
    data.update(overrides)
    return data


def formation_payload(**overrides) -> dict:
    data = {
        "titre": "Java Basics",
        "niveau": "DEBUTANT",
        "capacite_min": 1,
        "capacite_max": 3,
        "date_debut": future(10).isoformat(),
        "date_fin": future(20).isoformat(),
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_apprenant(db):
    counter = {"i": 0}

    async def _make(**overrides):
        counter["i"] += 1
        return await ApprenantService(db).create(ApprenantCreate(**apprenant_payload(counter["i"], **overrides)))

    return _make


@pytest.fixture
def make_formateur(db):
    counter = {"i": 0}

    async def _make(**overrides):
        counter["i"] += 1
        return await FormateurService(db).create(FormateurCreate(**formateur_payload(counter["i"], **overrides)))

    return _make


@pytest.fixture
def make_classe(db):
    counter = {"i": 100}

    async def _make(**overrides):
        counter["i"] += 1
        data = {"nom": f"Classe {counter['i']}", "num_salle": str(counter["i"])}
        data.update(overrides)
        return await ClasseService(db).create(ClasseCreate(**data))

    return _make


@pytest.fixture
def make_formation(db):
    async def _make(**overrides):
        return await FormationService(db).create(FormationCreate(**formation_payload(**overrides)))

    return _make


