"""
app.models

Package ORM (SQLAlchemy) : définition des entités persistées en base.

Rôle (fonctionnel) :
- Centralise les modèles du centre de formation (Apprenant, Formateur, Classe, Formation, Inscription).
- Importer ce package enregistre toutes les tables dans Base.metadata (migrations, tests).
"""

from app.models.enums import FormationStatus, NiveauFormation
from app.models.inscription import Inscription
from app.models.apprenant import Apprenant
from app.models.formateur import Formateur
from app.models.classe import Classe
from app.models.formation import Formation

__all__ = [
    "Apprenant",
    "Classe",
    "Formateur",
    "Formation",
    "FormationStatus",
    "Inscription",
    "NiveauFormation",
]
