from __future__ import annotations

from typing import Union

from app.core.errors import ConflictError
from app.models import Apprenant, Formateur, Formation
from app.validation.lifecycle import ensure_membership_open

"""
Règles d’intégrité des relations.

Rôle (fonctionnel) :
- Contrôles appliqués au moment où deux entités sont liées ou déliées :
  - un apprenant / formateur appartient à au plus une classe ;
  - une formation n’accepte des apprenants que si elle est PLANIFIEE et non pleine ;
  - une formation a au plus un formateur, modifiable uniquement si PLANIFIEE.
- Les entités sont déjà résolues (NotFound géré par l’appelant) ; aucune écriture ici.

Chaque erreur porte les identifiants concernés dans `details`.
"""

ClasseMember = Union[Apprenant, Formateur]


def _member_key(member: ClasseMember) -> str:
    return "apprenant_id" if isinstance(member, Apprenant) else "formateur_id"


def _member_label(member: ClasseMember) -> str:
    return "L'apprenant" if isinstance(member, Apprenant) else "Le formateur"


def ensure_can_join_classe(member: ClasseMember, classe_id: int) -> None:
    """Affectation possible uniquement si le membre n’a pas encore de classe."""
    if member.classe_id is not None:
        raise ConflictError(
            f"{_member_label(member)} est déjà assigné à une classe",
            **{_member_key(member): member.id},
            classe_id=classe_id,
            current_classe_id=member.classe_id,
        )


def ensure_in_classe(member: ClasseMember, classe_id: int) -> None:
    """Retrait possible uniquement si le membre est assigné à CETTE classe."""
    if member.classe_id != classe_id:
        raise ConflictError(
            f"{_member_label(member)} n'est pas assigné à cette classe",
            **{_member_key(member): member.id},
            classe_id=classe_id,
            current_classe_id=member.classe_id,
        )


def is_enrolled(formation: Formation, apprenant_id: int) -> bool:
    return apprenant_id in formation.apprenant_ids


def ensure_can_enroll(formation: Formation, apprenant: Apprenant) -> bool:
    """
    Contrôle une inscription.

    Retourne False si l’apprenant est déjà inscrit (no-op, aucune place consommée),
    True si l’inscription doit être ajoutée. Lève ConflictError sinon.
    """
    ids = {"formation_id": formation.id, "apprenant_id": apprenant.id}
    ensure_membership_open(formation.statut, "L'inscription d'un apprenant", **ids)

    if is_enrolled(formation, apprenant.id):
        return False

    if formation.nb_inscrits >= formation.capacite_max:
        raise ConflictError(
            "La formation a atteint sa capacité maximale",
            capacite_max=formation.capacite_max,
            nb_inscrits=formation.nb_inscrits,
            **ids,
        )
    return True


def ensure_can_unenroll(formation: Formation, apprenant: Apprenant) -> None:
    ensure_membership_open(
        formation.statut,
        "Le retrait d'un apprenant",
        formation_id=formation.id,
        apprenant_id=apprenant.id,
    )


def ensure_can_assign_formateur(formation: Formation, formateur: Formateur) -> None:
    ids = {"formation_id": formation.id, "formateur_id": formateur.id}
    if formation.formateur_id is not None:
        raise ConflictError(
            "La formation a déjà un formateur assigné",
            current_formateur_id=formation.formateur_id,
            **ids,
        )
    ensure_membership_open(formation.statut, "L'affectation d'un formateur", **ids)


def ensure_can_remove_formateur(formation: Formation, formateur: Formateur) -> None:
    ids = {"formation_id": formation.id, "formateur_id": formateur.id}
    if formation.formateur_id != formateur.id:
        raise ConflictError(
            "Le formateur n'est pas assigné à cette formation",
            current_formateur_id=formation.formateur_id,
            **ids,
        )
    ensure_membership_open(formation.statut, "Le retrait d'un formateur", **ids)


def ensure_capacity_covers_enrolled(formation: Formation, capacite_max: int) -> None:
    """Une mise à jour ne peut pas descendre capacite_max sous le nombre d’inscrits."""
    if capacite_max < formation.nb_inscrits:
        raise ConflictError(
            "La capacité maximale ne peut pas être inférieure au nombre d'inscrits",
            formation_id=formation.id,
            capacite_max=capacite_max,
            nb_inscrits=formation.nb_inscrits,
        )
