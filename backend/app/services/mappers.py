from __future__ import annotations

from app.models import Apprenant, Classe, Formateur, Formation
from app.schemas.apprenants import ApprenantDTO
from app.schemas.classes import ClasseDTO
from app.schemas.formateurs import FormateurDTO
from app.schemas.formations import FormationDTO

"""
Mappers entité <-> DTO.

Rôle (fonctionnel) :
- *_to_dto : construit la représentation exposée ; les relations sont rendues sous forme
  d’ensembles d’identifiants triés (classe_id, formation_ids, apprenant_ids…).
- *_to_entity : construit une entité transiente depuis un DTO (import, seed, tests).

Références :
- Les références possédées par l’entité (Apprenant.classe_id, Apprenant.formation_ids,
  Formateur.classe_id, Formation.formateur_id, Formation.apprenant_ids) sont reportées
  telles quelles sur l’entité.
- Les projections inverses (Classe.apprenant_ids / formateur_ids, Formateur.formation_ids)
  sont calculées à la lecture depuis les lignes propriétaires : elles ne sont pas écrites
  par *_to_entity.
- L’aller-retour to_dto(to_entity(dto)) == dto ne vaut donc que pour les champs scalaires
  et les références possédées.
"""


def apprenant_to_dto(apprenant: Apprenant) -> ApprenantDTO:
    return ApprenantDTO(
        id=apprenant.id,
        nom=apprenant.nom,
        prenom=apprenant.prenom,
        email=apprenant.email,
        niveau=apprenant.niveau,
        classe_id=apprenant.classe_id,
        formation_ids=sorted(apprenant.formation_ids),
    )


def apprenant_to_entity(dto: ApprenantDTO) -> Apprenant:
    apprenant = Apprenant(
        id=dto.id,
        nom=dto.nom,
        prenom=dto.prenom,
        email=dto.email,
        niveau=dto.niveau,
        classe_id=dto.classe_id,
    )
    apprenant.formation_ids = sorted(set(dto.formation_ids))
    return apprenant


def formateur_to_dto(formateur: Formateur) -> FormateurDTO:
    return FormateurDTO(
        id=formateur.id,
        nom=formateur.nom,
        prenom=formateur.prenom,
        email=formateur.email,
        specialite=formateur.specialite,
        classe_id=formateur.classe_id,
        formation_ids=formateur.formation_ids,
    )


def formateur_to_entity(dto: FormateurDTO) -> Formateur:
    return Formateur(
        id=dto.id,
        nom=dto.nom,
        prenom=dto.prenom,
        email=dto.email,
        specialite=dto.specialite,
        classe_id=dto.classe_id,
    )


def classe_to_dto(classe: Classe) -> ClasseDTO:
    return ClasseDTO(
        id=classe.id,
        nom=classe.nom,
        num_salle=classe.num_salle,
        apprenant_ids=classe.apprenant_ids,
        formateur_ids=classe.formateur_ids,
    )


def classe_to_entity(dto: ClasseDTO) -> Classe:
    return Classe(
        id=dto.id,
        nom=dto.nom.strip(),
        num_salle=dto.num_salle.strip(),
    )


def formation_to_dto(formation: Formation) -> FormationDTO:
    return FormationDTO(
        id=formation.id,
        titre=formation.titre,
        niveau=formation.niveau,
        prerequis=formation.prerequis,
        capacite_min=formation.capacite_min,
        capacite_max=formation.capacite_max,
        date_debut=formation.date_debut,
        date_fin=formation.date_fin,
        statut=formation.statut,
        formateur_id=formation.formateur_id,
        apprenant_ids=sorted(formation.apprenant_ids),
    )


def formation_to_entity(dto: FormationDTO) -> Formation:
    formation = Formation(
        id=dto.id,
        titre=dto.titre,
        niveau=dto.niveau,
        prerequis=dto.prerequis,
        capacite_min=dto.capacite_min,
        capacite_max=dto.capacite_max,
        date_debut=dto.date_debut,
        date_fin=dto.date_fin,
        statut=dto.statut,
        formateur_id=dto.formateur_id,
    )
    formation.apprenant_ids = sorted(set(dto.apprenant_ids))
    return formation
