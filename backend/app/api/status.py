from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models import Formation, FormationStatus

"""
API System Status.

Rôle (fonctionnel) :
- Expose un endpoint de statut pour la supervision.
- Vérifie la disponibilité de la base (requête simple).
- Donne une vue rapide de l’activité : nombre de formations par statut,
  date de la dernière modification d’une formation.
"""

router = APIRouter(prefix="/system", tags=["system"])
log = logging.getLogger("app.status")


@router.get("/status")
async def system_status(db: AsyncSession = Depends(get_db)):
    # 1) DB check (requête minimale)
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        log.warning("db_check_failed", exc_info=True)
        db_ok = False

    # 2) Activité formations (si la base répond)
    formations = {s.value: 0 for s in FormationStatus}
    last_update = None
    if db_ok:
        rows = await db.execute(select(Formation.statut, func.count()).group_by(Formation.statut))
        for statut, count in rows.all():
            formations[FormationStatus(statut).value] = count

        last = (await db.execute(select(func.max(Formation.updated_at)))).scalar_one_or_none()
        last_update = last.isoformat() if last else None

    # Réponse (format constant) pour monitoring / UI
    return {
        "ok": db_ok,
        "db": {"ok": db_ok},
        "formations": formations,
        "last_update": last_update,
        "ts": datetime.now(timezone.utc).isoformat(),
    }
