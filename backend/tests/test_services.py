from datetime import timedelta

import pytest

from app.core.errors import ConflictError, InvalidFormatError, MissingFieldError, NotFoundError
from app.models import FormationStatus, NiveauFormation
from app.schemas.apprenants import ApprenantCreate, ApprenantUpdate
from app.schemas.classes import ClasseCreate, ClasseUpdate
from app.schemas.formateurs import FormateurCreate
from app.schemas.formations import FormationCreate, FormationUpdate
from app.services.apprenant_service import ApprenantService
from app.services.classe_service import ClasseService
from app.services.formateur_service import FormateurService
from app.services.formation_service import FormationService

from conftest import apprenant_payload, formateur_payload, formation_payload, future

"""
CRUD, unicité, suppression (sans référence pendante) et requêtes de consultation.
"""


# --- Création / validation ---


async def test_create_apprenant_normalizes(db):
    dto = await ApprenantService(db).create(
        ApprenantCreate(nom="  Martin ", prenom="Léa", email=" Lea.Martin@Example.COM ", niveau="AVANCE")
    )
    assert dto.id is not None
    assert dto.nom == "Martin"
    assert dto.email == "lea.martin@example.com"
    assert dto.niveau == NiveauFormation.AVANCE
    assert dto.classe_id is None
    assert dto.formation_ids == []


async def test_create_apprenant_missing_field(db):
    with pytest.raises(MissingFieldError) as exc_info:
        await ApprenantService(db).create(ApprenantCreate(**apprenant_payload(prenom="   ")))
    assert exc_info.value.details == {"field": "prenom"}


async def test_duplicate_email_per_kind(db, make_apprenant):
    await make_apprenant(email="dup@example.com")

    with pytest.raises(ConflictError):
        await ApprenantService(db).create(ApprenantCreate(**apprenant_payload(9, email="DUP@example.com")))

    # domaine d’unicité indépendant pour les formateurs
    f = await FormateurService(db).create(FormateurCreate(**formateur_payload(1, email="dup@example.com")))
    assert f.email == "dup@example.com"


async def test_update_keeps_own_email(db, make_apprenant):
    a = await make_apprenant(email="me@example.com")
    b = await make_apprenant(email="other@example.com")
    service = ApprenantService(db)

    dto = await service.update(a.id, ApprenantUpdate(**apprenant_payload(nom="Nouveau", email="me@example.com")))
    assert dto.nom == "Nouveau"

    with pytest.raises(ConflictError):
        await service.update(b.id, ApprenantUpdate(**apprenant_payload(email="me@example.com")))


async def test_update_and_delete_unknown_id(db):
    service = ApprenantService(db)
    with pytest.raises(NotFoundError):
        await service.update(42, ApprenantUpdate(**apprenant_payload()))
    with pytest.raises(NotFoundError):
        await service.delete(42)
    with pytest.raises(NotFoundError):
        await service.get(42)


async def test_duplicate_num_salle(db, make_classe):
    await make_classe(num_salle="101")
    with pytest.raises(ConflictError) as exc_info:
        await ClasseService(db).create(ClasseCreate(nom="Autre", num_salle="101"))
    assert exc_info.value.details["num_salle"] == "101"


async def test_classe_update_and_format(db, make_classe):
    c = await make_classe(num_salle="12")
    service = ClasseService(db)

    dto = await service.update(c.id, ClasseUpdate(nom="Renommée", num_salle="12"))
    assert dto.nom == "Renommée"

    with pytest.raises(InvalidFormatError):
        await service.create(ClasseCreate(nom="X", num_salle="13"))
    with pytest.raises(InvalidFormatError):
        await service.create(ClasseCreate(nom="Valide", num_salle="1000"))


async def test_create_formation_defaults(db):
    dto = await FormationService(db).create(FormationCreate(**formation_payload()))
    assert dto.statut == FormationStatus.PLANIFIEE
    assert dto.formateur_id is None
    assert dto.apprenant_ids == []


async def test_create_formation_rejects_other_status(db):
    with pytest.raises(ConflictError):
        await FormationService(db).create(FormationCreate(**formation_payload(statut="EN_COURS")))


async def test_create_formation_with_formateur(db, make_formateur):
    f = await make_formateur()
    service = FormationService(db)

    dto = await service.create(FormationCreate(**formation_payload(formateur_id=f.id)))
    assert dto.formateur_id == f.id

    with pytest.raises(NotFoundError):
        await service.create(FormationCreate(**formation_payload(formateur_id=999)))


@pytest.mark.parametrize(
    "overrides,error",
    [
        ({"titre": "ab"}, InvalidFormatError),
        ({"titre": None}, MissingFieldError),
        ({"capacite_min": 5, "capacite_max": 2}, InvalidFormatError),
        ({"capacite_min": 0}, InvalidFormatError),
        ({"date_debut": future(-2).isoformat()}, InvalidFormatError),
        ({"date_debut": future(30).isoformat(), "date_fin": future(20).isoformat()}, InvalidFormatError),
        ({"date_fin": None}, MissingFieldError),
    ],
)
async def test_create_formation_invalid(db, overrides, error):
    with pytest.raises(error):
        await FormationService(db).create(FormationCreate(**formation_payload(**overrides)))


async def test_update_formation_capacity_below_enrolled(db, make_apprenant, make_formation):
    formation = await make_formation(capacite_max=3)
    service = FormationService(db)
    for _ in range(2):
        await service.add_apprenant(formation.id, (await make_apprenant()).id)

    with pytest.raises(ConflictError):
        await service.update(formation.id, FormationUpdate(**formation_payload(capacite_min=1, capacite_max=1)))

    dto = await service.update(formation.id, FormationUpdate(**formation_payload(titre="Java avancé", capacite_max=2)))
    assert dto.titre == "Java avancé"
    assert dto.capacite_max == 2
    assert len(dto.apprenant_ids) == 2


async def test_update_formation_accepts_past_start(db, make_formation):
    formation = await make_formation()
    payload = formation_payload(date_debut=future(-3).isoformat(), date_fin=future(2).isoformat())
    dto = await FormationService(db).update(formation.id, FormationUpdate(**payload))
    assert dto.id == formation.id


# --- Suppression : aucune référence pendante ---


async def test_delete_classe_detaches_members(db, make_apprenant, make_formateur, make_classe):
    c = await make_classe()
    a = await make_apprenant()
    f = await make_formateur()
    await ApprenantService(db).assign_to_classe(a.id, c.id)
    await FormateurService(db).assign_to_classe(f.id, c.id)

    await ClasseService(db).delete(c.id)

    assert (await ApprenantService(db).get(a.id)).classe_id is None
    assert (await FormateurService(db).get(f.id)).classe_id is None
    with pytest.raises(NotFoundError):
        await ClasseService(db).get(c.id)


async def test_delete_formateur_clears_formations(db, make_formateur, make_formation):
    f = await make_formateur()
    formation = await make_formation(formateur_id=f.id)

    await FormateurService(db).delete(f.id)

    assert (await FormationService(db).get(formation.id)).formateur_id is None


async def test_delete_apprenant_removes_enrollments(db, make_apprenant, make_formation):
    formation = await make_formation()
    a = await make_apprenant()
    b = await make_apprenant()
    service = FormationService(db)
    await service.add_apprenant(formation.id, a.id)
    await service.add_apprenant(formation.id, b.id)

    await ApprenantService(db).delete(a.id)

    assert (await service.get(formation.id)).apprenant_ids == [b.id]


async def test_delete_formation_removes_enrollments(db, make_apprenant, make_formation):
    formation = await make_formation()
    a = await make_apprenant()
    await FormationService(db).add_apprenant(formation.id, a.id)

    await FormationService(db).delete(formation.id)

    assert (await ApprenantService(db).get(a.id)).formation_ids == []


# --- Consultation ---


async def test_search_and_pagination(db, make_apprenant):
    await make_apprenant(nom="Lefebvre", prenom="Anne")
    await make_apprenant(nom="Martin", prenom="Lefèvre")
    await make_apprenant(nom="Durand", prenom="Hugo")
    service = ApprenantService(db)

    page = await service.search("LEF", page=1, page_size=10)
    assert page.meta.total == 2
    assert [a.nom for a in page.data] == ["Lefebvre", "Martin"]

    first = await service.list(page=1, page_size=2)
    second = await service.list(page=2, page_size=2)
    assert first.meta.total == 3
    assert len(first.data) == 2
    assert len(second.data) == 1


async def test_search_escapes_wildcards(db, make_apprenant):
    await make_apprenant(nom="Dupont")
    page = await ApprenantService(db).search("%", page=1, page_size=10)
    assert page.meta.total == 0


async def test_apprenant_finders(db, make_apprenant, make_classe):
    c = await make_classe()
    a = await make_apprenant(niveau="AVANCE", email="find@example.com")
    await make_apprenant(niveau="DEBUTANT")
    service = ApprenantService(db)
    await service.assign_to_classe(a.id, c.id)

    assert [x.id for x in await service.find_by_niveau(NiveauFormation.AVANCE)] == [a.id]
    assert (await service.find_by_email("FIND@example.com")).id == a.id
    assert [x.id for x in await service.find_by_classe(c.id)] == [a.id]
    with pytest.raises(NotFoundError) as exc_info:
        await service.find_by_email("nobody@example.com")
    assert exc_info.value.details == {"entity": "Apprenant", "email": "nobody@example.com"}
    assert "id=" not in exc_info.value.message


async def test_formateur_finders(db, make_formateur, make_formation):
    f1 = await make_formateur(specialite="Python")
    f2 = await make_formateur(specialite="Python")
    await make_formateur(specialite="Réseaux")
    await make_formation(formateur_id=f1.id)
    service = FormateurService(db)

    assert await service.list_specialites() == ["Python", "Réseaux"]
    assert [f.id for f in await service.find_by_specialite("python")] == [f1.id, f2.id]
    assert [f.id for f in await service.find_available("Python", 1)] == [f2.id]
    assert [f.id for f in await service.find_available("Python", 2)] == [f1.id, f2.id]


async def test_classe_finders(db, make_apprenant, make_classe):
    full = await make_classe(nom="Alpha")
    empty = await make_classe(nom="Beta")
    a = await make_apprenant()
    await ClasseService(db).assign_apprenant(full.id, a.id)
    service = ClasseService(db)

    assert [c.id for c in await service.search("alp")] == [full.id]
    assert [c.id for c in await service.find_available(1)] == [empty.id]
    assert [c.id for c in await service.find_available(2)] == [full.id, empty.id]


async def test_formation_finders(db, make_apprenant, make_formateur, make_formation):
    f = await make_formateur()
    soon = await make_formation(titre="Python avancé", niveau="AVANCE", capacite_max=1, formateur_id=f.id,
                                date_debut=future(5).isoformat(), date_fin=future(6).isoformat())
    later = await make_formation(titre="SQL essentiel", date_debut=future(40).isoformat(),
                                 date_fin=future(45).isoformat())
    started = await make_formation(titre="Réseaux")
    service = FormationService(db)
    await service.update_status(started.id, FormationStatus.EN_COURS)
    await service.add_apprenant(soon.id, (await make_apprenant()).id)

    assert [x.id for x in await service.find_by_statut(FormationStatus.EN_COURS)] == [started.id]
    assert [x.id for x in await service.find_by_formateur(f.id)] == [soon.id]
    assert [x.id for x in await service.find_with_available_places()] == [later.id]
    assert [x.id for x in await service.find_planned_by_niveau(NiveauFormation.AVANCE)] == [soon.id]
    assert [x.id for x in await service.find_between_dates(future(30), future(50))] == [later.id]

    upcoming = await service.find_upcoming(FormationStatus.PLANIFIEE, page=1, page_size=10)
    assert [x.id for x in upcoming.data] == [soon.id, later.id]

    search = await service.search("python", page=1, page_size=10)
    assert [x.id for x in search.data] == [soon.id]

    full = await service.is_full(soon.id)
    assert full.full is True and full.nb_inscrits == 1 and full.capacite_max == 1


async def test_find_between_dates_bounds(db, make_formation):
    formation = await make_formation(date_debut=future(10).isoformat(), date_fin=future(12).isoformat())
    dto = await FormationService(db).get(formation.id)
    debut = dto.date_debut
    results = await FormationService(db).find_between_dates(debut - timedelta(minutes=1), debut + timedelta(minutes=1))
    assert [x.id for x in results] == [formation.id]
