from __future__ import annotations

from enum import Enum

"""
Énumérations métier partagées (ORM, schémas, validation).

- NiveauFormation : niveau d’un apprenant ou d’une formation.
- FormationStatus : statut du cycle de vie d’une formation (voir app.validation.lifecycle).
"""


class NiveauFormation(str, Enum):
    DEBUTANT = "DEBUTANT"
    INTERMEDIAIRE = "INTERMEDIAIRE"
    AVANCE = "AVANCE"


class FormationStatus(str, Enum):
    PLANIFIEE = "PLANIFIEE"
    EN_COURS = "EN_COURS"
    TERMINEE = "TERMINEE"
    ANNULEE = "ANNULEE"
