from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, WriteAuthDep, pagination
from app.db.session import get_db
from app.schemas.common import ApiResponse, PageResponse
from app.schemas.formateurs import FormateurCreate, FormateurDTO, FormateurUpdate
from app.services.formateur_service import FormateurService

"""
API Formateurs.

Rôle (fonctionnel) :
- CRUD des formateurs, liste paginée et recherche (nom / prénom).
- Consultation par email, par spécialité, formateurs disponibles, liste des spécialités.
- Affectation / retrait d’une classe et d’une formation.
"""

router = APIRouter(prefix="/formateurs", tags=["formateurs"])


@router.post("", status_code=201, response_model=ApiResponse[FormateurDTO], dependencies=[WriteAuthDep])
async def create_formateur(payload: FormateurCreate, db: AsyncSession = Depends(get_db)):
    created = await FormateurService(db).create(payload)
    return ApiResponse(message="Formateur créé avec succès", data=created)


@router.get("", response_model=PageResponse[FormateurDTO])
async def list_formateurs(db: AsyncSession = Depends(get_db), p: Pagination = Depends(pagination)):
    return await FormateurService(db).list(page=p.page, page_size=p.page_size)


@router.get("/search", response_model=PageResponse[FormateurDTO])
async def search_formateurs(
    term: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_db),
    p: Pagination = Depends(pagination),
):
    return await FormateurService(db).search(term, page=p.page, page_size=p.page_size)


@router.get("/specialites", response_model=List[str])
async def list_specialites(db: AsyncSession = Depends(get_db)):
    return await FormateurService(db).list_specialites()


@router.get("/specialite/{specialite}", response_model=List[FormateurDTO])
async def find_formateurs_by_specialite(specialite: str, db: AsyncSession = Depends(get_db)):
    return await FormateurService(db).find_by_specialite(specialite)


@router.get("/available", response_model=List[FormateurDTO])
async def find_available_formateurs(
    specialite: str = Query(..., min_length=1),
    max_formations: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
):
    return await FormateurService(db).find_available(specialite, max_formations)


@router.get("/email/{email}", response_model=FormateurDTO)
async def find_formateur_by_email(email: str, db: AsyncSession = Depends(get_db)):
    return await FormateurService(db).find_by_email(email)


@router.get("/{formateur_id}", response_model=FormateurDTO)
async def get_formateur(formateur_id: int, db: AsyncSession = Depends(get_db)):
    return await FormateurService(db).get(formateur_id)


@router.put("/{formateur_id}", response_model=ApiResponse[FormateurDTO], dependencies=[WriteAuthDep])
async def update_formateur(formateur_id: int, payload: FormateurUpdate, db: AsyncSession = Depends(get_db)):
    updated = await FormateurService(db).update(formateur_id, payload)
    return ApiResponse(message="Formateur mis à jour avec succès", data=updated)


@router.delete("/{formateur_id}", response_model=ApiResponse[None], dependencies=[WriteAuthDep])
async def delete_formateur(formateur_id: int, db: AsyncSession = Depends(get_db)):
    await FormateurService(db).delete(formateur_id)
    return ApiResponse(message="Formateur supprimé avec succès")


# --- Relations ---


@router.post(
    "/{formateur_id}/classes/{classe_id}",
    response_model=ApiResponse[FormateurDTO],
    dependencies=[WriteAuthDep],
)
async def assign_formateur_to_classe(formateur_id: int, classe_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormateurService(db).assign_to_classe(formateur_id, classe_id)
    return ApiResponse(message="Formateur assigné à la classe avec succès", data=data)


@router.delete(
    "/{formateur_id}/classes/{classe_id}",
    response_model=ApiResponse[FormateurDTO],
    dependencies=[WriteAuthDep],
)
async def remove_formateur_from_classe(formateur_id: int, classe_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormateurService(db).remove_from_classe(formateur_id, classe_id)
    return ApiResponse(message="Formateur retiré de la classe avec succès", data=data)


@router.post(
    "/{formateur_id}/formations/{formation_id}",
    response_model=ApiResponse[FormateurDTO],
    dependencies=[WriteAuthDep],
)
async def assign_formateur_to_formation(formateur_id: int, formation_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormateurService(db).assign_to_formation(formateur_id, formation_id)
    return ApiResponse(message="Formateur assigné à la formation avec succès", data=data)


@router.delete(
    "/{formateur_id}/formations/{formation_id}",
    response_model=ApiResponse[FormateurDTO],
    dependencies=[WriteAuthDep],
)
async def remove_formateur_from_formation(formateur_id: int, formation_id: int, db: AsyncSession = Depends(get_db)):
    data = await FormateurService(db).remove_from_formation(formateur_id, formation_id)
    return ApiResponse(message="Formateur retiré de la formation avec succès", data=data)
