from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, WriteAuthDep, pagination
from app.db.session import get_db
from app.schemas.classes import ClasseCreate, ClasseDTO, ClasseUpdate
from app.schemas.common import ApiResponse, PageResponse
from app.services.classe_service import ClasseService

"""
API Classes.

Rôle (fonctionnel) :
- CRUD des classes, liste paginée, recherche par nom, classes disponibles.
- Affectation / retrait d’apprenants et de formateurs depuis la classe.
"""

router = APIRouter(prefix="/classes", tags=["classes"])


@router.post("", status_code=201, response_model=ApiResponse[ClasseDTO], dependencies=[WriteAuthDep])
async def create_classe(payload: ClasseCreate, db: AsyncSession = Depends(get_db)):
    created = await ClasseService(db).create(payload)
    return ApiResponse(message="Classe créée avec succès", data=created)


@router.get("", response_model=PageResponse[ClasseDTO])
async def list_classes(db: AsyncSession = Depends(get_db), p: Pagination = Depends(pagination)):
    return await ClasseService(db).list(page=p.page, page_size=p.page_size)


@router.get("/search", response_model=List[ClasseDTO])
async def search_classes(nom: str = Query(..., min_length=1), db: AsyncSession = Depends(get_db)):
    return await ClasseService(db).search(nom)


@router.get("/available", response_model=List[ClasseDTO])
async def find_available_classes(max_capacity: int = Query(..., ge=1), db: AsyncSession = Depends(get_db)):
    return await ClasseService(db).find_available(max_capacity)


@router.get("/{classe_id}", response_model=ClasseDTO)
async def get_classe(classe_id: int, db: AsyncSession = Depends(get_db)):
    return await ClasseService(db).get(classe_id)


@router.put("/{classe_id}", response_model=ApiResponse[ClasseDTO], dependencies=[WriteAuthDep])
async def update_classe(classe_id: int, payload: ClasseUpdate, db: AsyncSession = Depends(get_db)):
    updated = await ClasseService(db).update(classe_id, payload)
    return ApiResponse(message="Classe mise à jour avec succès", data=updated)


@router.delete("/{classe_id}", response_model=ApiResponse[None], dependencies=[WriteAuthDep])
async def delete_classe(classe_id: int, db: AsyncSession = Depends(get_db)):
    await ClasseService(db).delete(classe_id)
    return ApiResponse(message="Classe supprimée avec succès")


# --- Relations ---


@router.post(
    "/{classe_id}/apprenants/{apprenant_id}",
    response_model=ApiResponse[ClasseDTO],
    dependencies=[WriteAuthDep],
)
async def assign_apprenant(classe_id: int, apprenant_id: int, db: AsyncSession = Depends(get_db)):
    data = await ClasseService(db).assign_apprenant(classe_id, apprenant_id)
    return ApiResponse(message="Apprenant assigné à la classe avec succès", data=data)


@router.delete(
    "/{classe_id}/apprenants/{apprenant_id}",
    response_model=ApiResponse[ClasseDTO],
    dependencies=[WriteAuthDep],
)
async def remove_apprenant(classe_id: int, apprenant_id: int, db: AsyncSession = Depends(get_db)):
    data = await ClasseService(db).remove_apprenant(classe_id, apprenant_id)
    return ApiResponse(message="Apprenant retiré de la classe avec succès", data=data)


@router.post(
    "/{classe_id}/formateurs/{formateur_id}",
    response_model=ApiResponse[ClasseDTO],
    dependencies=[WriteAuthDep],
)
async def assign_formateur(classe_id: int, formateur_id: int, db: AsyncSession = Depends(get_db)):
    data = await ClasseService(db).assign_formateur(classe_id, formateur_id)
    return ApiResponse(message="Formateur assigné à la classe avec succès", data=data)


@router.delete(
    "/{classe_id}/formateurs/{formateur_id}",
    response_model=ApiResponse[ClasseDTO],
    dependencies=[WriteAuthDep],
)
async def remove_formateur(classe_id: int, formateur_id: int, db: AsyncSession = Depends(get_db)):
    data = await ClasseService(db).remove_formateur(classe_id, formateur_id)
    return ApiResponse(message="Formateur retiré de la classe avec succès", data=data)
