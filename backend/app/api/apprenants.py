from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, WriteAuthDep, pagination
from app.db.session import get_db
from app.models.enums import NiveauFormation
from app.schemas.apprenants import ApprenantCreate, ApprenantDTO, ApprenantUpdate
from app.schemas.common import ApiResponse, PageResponse
from app.services.apprenant_service import ApprenantService

"""
API Apprenants.

Rôle (fonctionnel) :
- CRUD des apprenants, liste paginée et recherche (nom / prénom).
- Recherche par niveau, email, classe.
- Affectation / retrait d’une classe, inscription / désinscription d’une formation.

Les routes d’écriture sont protégées par la clé API (WriteAuthDep).
Les erreurs métier remontent telles quelles : leur mapping HTTP est fait dans app.main.
"""

router = APIRouter(prefix="/apprenants", tags=["apprenants"])


@router.post("", status_code=201, response_model=ApiResponse[ApprenantDTO], dependencies=[WriteAuthDep])
async def create_apprenant(payload: ApprenantCreate, db: AsyncSession = Depends(get_db)):
    created = await ApprenantService(db).create(payload)
    return ApiResponse(message="Apprenant créé avec succès", data=created)


@router.get("", response_model=PageResponse[ApprenantDTO])
async def list_apprenants(db: AsyncSession = Depends(get_db), p: Pagination = Depends(pagination)):
    return await ApprenantService(db).list(page=p.page, page_size=p.page_size)


@router.get("/search", response_model=PageResponse[ApprenantDTO])
async def search_apprenants(
    term: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    p: Pagination = Depends(pagination),
):
    return await ApprenantService(db).search(term, page=p.page, page_size=p.page_size)


@router.get("/niveau/{niveau}", response_model=List[ApprenantDTO])
async def find_apprenants_by_niveau(niveau: NiveauFormation, db: AsyncSession = Depends(get_db)):
    return await ApprenantService(db).find_by_niveau(niveau)


@router.get("/email/{email}", response_model=ApprenantDTO)
async def find_apprenant_by_email(email: str, db: AsyncSession = Depends(get_db)):
    return await ApprenantService(db).find_by_email(email)


@router.get("/classe/{classe_id}", response_model=List[ApprenantDTO])
async def find_apprenants_by_classe(classe_id: int, db: AsyncSession = Depends(get_db)):
    return await ApprenantService(db).find_by_classe(classe_id)


@router.get("/{apprenant_id}", response_model=ApprenantDTO)
async def get_apprenant(apprenant_id: int, db: AsyncSession = Depends(get_db)):
    return await ApprenantService(db).get(apprenant_id)


@router.put("/{apprenant_id}", response_model=ApiResponse[ApprenantDTO], dependencies=[WriteAuthDep])
async def update_apprenant(apprenant_id: int, payload: ApprenantUpdate, db: AsyncSession = Depends(get_db)):
    updated = await ApprenantService(db).update(apprenant_id, payload)
    return ApiResponse(message="Apprenant mis à jour avec succès", data=updated)


@router.delete("/{apprenant_id}", response_model=ApiResponse[None], dependencies=[WriteAuthDep])
async def delete_apprenant(apprenant_id: int, db: AsyncSession = Depends(get_db)):
    await ApprenantService(db).delete(apprenant_id)
    return ApiResponse(message="Apprenant supprimé avec succès")


# --- Relations ---


@router.post(
    "/{apprenant_id}/classes/{classe_id}",
    response_model=ApiResponse[ApprenantDTO],
    dependencies=[WriteAuthDep],
)
async def assign_apprenant_to_classe(apprenant_id: int, classe_id: int, db: AsyncSession = Depends(get_db)):
    data = await ApprenantService(db).assign_to_classe(apprenant_id, classe_id)
    return ApiResponse(message="Apprenant assigné à la classe avec succès", data=data)


@router.delete(
    "/{apprenant_id}/classes/{classe_id}",
    response_model=ApiResponse[ApprenantDTO],
    dependencies=[WriteAuthDep],
)
async def remove_apprenant_from_classe(apprenant_id: int, classe_id: int, db: AsyncSession = Depends(get_db)):
    data = await ApprenantService(db).remove_from_classe(apprenant_id, classe_id)
    return ApiResponse(message="Apprenant retiré de la classe avec succès", data=data)


@router.post(
    "/{apprenant_id}/formations/{formation_id}",
    response_model=ApiResponse[ApprenantDTO],
    dependencies=[WriteAuthDep],
)
async def enroll_apprenant(apprenant_id: int, formation_id: int, db: AsyncSession = Depends(get_db)):
    data = await ApprenantService(db).assign_to_formation(apprenant_id, formation_id)
    return ApiResponse(message="Apprenant inscrit à la formation avec succès", data=data)


@router.delete(
    "/{apprenant_id}/formations/{formation_id}",
    response_model=ApiResponse[bool],
    dependencies=[WriteAuthDep],
)
async def unenroll_apprenant(apprenant_id: int, formation_id: int, db: AsyncSession = Depends(get_db)):
    removed = await ApprenantService(db).remove_from_formation(apprenant_id, formation_id)
    message = "Apprenant retiré de la formation avec succès" if removed else "L'apprenant n'était pas inscrit"
    return ApiResponse(message=message, data=removed)
