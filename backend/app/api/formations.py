from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, WriteAuthDep, pagination
from app.db.session import get_db
from app.models.enums import FormationStatus, NiveauFormation
from app.schemas.common import ApiResponse, PageResponse
from app.schemas.formations import FormationCreate, FormationDTO, FormationFullOut, FormationUpdate
from app.services.formation_service import FormationService

"""
API Formations.

Rôle (fonctionnel) :
- CRUD des formations, liste et recherche paginées (titre).
- Consultation : par statut, par période, par formateur, places disponibles,
  planifiées par niveau, à venir, formation complète.
- Cycle de vie : PUT /{id}/status/{statut} (machine à états, 409 si transition interdite).
- Inscriptions d’apprenants et affectation du formateur.

Notes :
- Les routes statiques (/search, /status/..., /dates…) sont déclarées avant /{formation_id}.
"""

router = APIRouter(prefix="/formations", tags=["formations"])


@router.post("", status_code=201, response_model=ApiResponse[FormationDTO], dependencies=[WriteAuthDep])
async def create_formation(payload: FormationCreate, db: AsyncSession = Depends(get_db)):
    created = await FormationService(db).create(payload)
    return ApiResponse(message="Formation créée avec succès", data=created)


@router.get("", response_model=PageResponse[FormationDTO])
async def list_formations(db: AsyncSession = Depends(get_db), p: Pagination = Depends(pagination)):
    return await FormationService(db).list(page=p.page, page_size=p.page_size)


@router.get("/search", response_model=PageResponse[FormationDTO])
async def search_formations(
    titre: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    p: Pagination = Depends(pagination),
):
    return await FormationService(db).search(titre, page=p.page, page_size=p.page_size)


@router.get("/status/{statut}", response_model=List[FormationDTO])
async def find_formations_by_statut(statut: FormationStatus, db: AsyncSession = Depends(get_db)):
    return await FormationService(db).find_by_statut(statut)


@router.get("/dates", response_model=List[FormationDTO])
async def find_formations_between_dates(
    debut: datetime = Query(...),
    fin: datetime = Query(...),
    db: AsyncSession = Depends(get_db),
):
    return await FormationService(db).find_between_dates(debut, fin)


@router.get("/formateur/{formateur_id}", response_model=List[FormationDTO])
async def find_formations_by_formateur(formateur_id: int, db: AsyncSession = Depends(get_db)):
    return await FormationService(db).find_by_formateur(formateur_id)


@router.get("/available", response_model=List[FormationDTO])
async def find_formations_with_available_places(db: AsyncSession = Depends(get_db)):
    return await FormationService(db).find_with_available_places()


@router.get("/niveau/{niveau}", response_model=List[FormationDTO])
async def find_planned_formations_by_niveau(niveau: NiveauFormation, db: AsyncSession = Depends(get_db)):
    return await FormationService(db).find_planned_by_niveau(niveau)


@router.get("/upcoming", response_model=PageResponse[FormationDTO])
async def find_upcoming_formations(
    statut: FormationStatus = Query(FormationStatus.PLANIFIEE),
    db: AsyncSession = Depends(get_db),
    p: Pagination = Depends(pagination),
):
    return await FormationService(db).find_upcoming(statut, page=p.page, page_size=p.page_size)


@router.get("/{formation_id}", response_model=FormationDTO)
async def get_formation(formation_id: int, db: AsyncSession = Depends(get_db)):
    return await FormationService(db).get(formation_id)


@router.get("/{formation_id}/full", response_model=ApiResponse[FormationFullOut])
async def is_formation_full(formation_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormationService(db).is_full(formation_id)
    return ApiResponse(message="Vérification effectuée", data=data)


@router.put("/{formation_id}", response_model=ApiResponse[FormationDTO], dependencies=[WriteAuthDep])
async def update_formation(formation_id: int, payload: FormationUpdate, db: AsyncSession = Depends(get_db)):
    updated = await FormationService(db).update(formation_id, payload)
    return ApiResponse(message="Formation mise à jour avec succès", data=updated)


@router.delete("/{formation_id}", response_model=ApiResponse[None], dependencies=[WriteAuthDep])
async def delete_formation(formation_id: int, db: AsyncSession = Depends(get_db)):
    await FormationService(db).delete(formation_id)
    return ApiResponse(message="Formation supprimée avec succès")


@router.put(
    "/{formation_id}/status/{statut}",
    response_model=ApiResponse[FormationDTO],
    dependencies=[WriteAuthDep],
)
async def update_formation_status(formation_id: int, statut: FormationStatus, db: AsyncSession = Depends(get_db)):
    data = await FormationService(db).update_status(formation_id, statut)
    return ApiResponse(message="Statut de la formation mis à jour avec succès", data=data)


# --- Relations ---


@router.post(
    "/{formation_id}/apprenants/{apprenant_id}",
    response_model=ApiResponse[FormationDTO],
    dependencies=[WriteAuthDep],
)
async def add_apprenant(formation_id: int, apprenant_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormationService(db).add_apprenant(formation_id, apprenant_id)
    return ApiResponse(message="Apprenant ajouté à la formation avec succès", data=data)


@router.delete(
    "/{formation_id}/apprenants/{apprenant_id}",
    response_model=ApiResponse[bool],
    dependencies=[WriteAuthDep],
)
async def remove_apprenant(formation_id: int, apprenant_id: int, db: AsyncSession = Depends(get_db)):
    removed = await FormationService(db).remove_apprenant(formation_id, apprenant_id)
    message = "Apprenant retiré de la formation avec succès" if removed else "L'apprenant n'était pas inscrit"
    return ApiResponse(message=message, data=removed)


@router.post(
    "/{formation_id}/formateurs/{formateur_id}",
    response_model=ApiResponse[FormationDTO],
    dependencies=[WriteAuthDep],
)
async def assign_formateur(formation_id: int, formateur_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormationService(db).assign_formateur(formation_id, formateur_id)
    return ApiResponse(message="Formateur assigné à la formation avec succès", data=data)


@router.delete(
    "/{formation_id}/formateurs/{formateur_id}",
    response_model=ApiResponse[FormationDTO],
    dependencies=[WriteAuthDep],
)
async def remove_formateur(formation_id: int, formateur_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormationService(db).remove_formateur(formation_id, formateur_id)
    return ApiResponse(message="Formateur retiré de la formation avec succès", data=data)
