from fastapi import APIRouter

from .health import router as health_router
from .status import router as status_router

from app.api.apprenants import router as apprenants_router
from app.api.formateurs import router as formateurs_router
from app.api.classes import router as classes_router
from app.api.formations import router as formations_router

"""
Router principal de l’API.

Rôle (fonctionnel) :
- Regroupe les routeurs par domaine (health, statut système, apprenants, formateurs,
  classes, formations).
- Les routeurs métier sont montés sous /api.
- Sert de point d’entrée unique pour l’inclusion dans l’application FastAPI.
"""

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(status_router)

api_router.include_router(apprenants_router, prefix="/api")
api_router.include_router(formateurs_router, prefix="/api")
api_router.include_router(classes_router, prefix="/api")
api_router.include_router(formations_router, prefix="/api")
