from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.settings import settings

"""
DB Session.

Rôle (fonctionnel) :
- Initialise l’engine SQLAlchemy en mode async (runtime FastAPI).
- Fournit une factory de sessions AsyncSession (AsyncSessionLocal).
- Expose `get_db()` comme dépendance FastAPI (Depends(get_db)).
- Expose `unit_of_work()` : une mutation multi-entités = un commit ou un rollback.

Notes :
- expire_on_commit=False : permet de réutiliser les objets après commit sans rechargement automatique.
- echo=False : désactive le log SQL brut (on préfère les logs applicatifs en JSON).
"""

log = logging.getLogger("app.db")

# Engine async utilisé par l’application (SQLAlchemy async)
engine = create_async_engine(settings.DATABASE_URL, echo=False)

# Factory de sessions async
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    """Dépendance FastAPI : yield une session DB et garantit sa fermeture."""
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Unité de travail explicite.

    - Toutes les écritures faites dans le bloc sont validées par un seul commit.
    - Toute exception (métier ou base) annule l’ensemble : pas de relation à moitié appliquée.
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        log.debug("unit_of_work rollback")
        raise
