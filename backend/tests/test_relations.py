import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConflictError, IllegalStateTransitionError, NotFoundError
from app.db.base import Base
from app.db.session import unit_of_work
from app.db.store import EntityStore
from app.models import Apprenant, Formation, FormationStatus, Inscription
from app.schemas.apprenants import ApprenantCreate
from app.schemas.formations import FormationCreate
from app.services.apprenant_service import ApprenantService
from app.services.classe_service import ClasseService
from app.services.formateur_service import FormateurService
from app.services.formation_service import FormationService
from app.services.relations import RelationService
from app.validation import relationships

from conftest import apprenant_payload, formation_payload

"""
Règles d’intégrité des relations, exercées à travers les services.
Base SQLite en mémoire ; base fichier pour les sessions concurrentes.
"""


# --- Classe ---


async def test_apprenant_single_classe(db, make_apprenant, make_classe):
    a = await make_apprenant()
    c1 = await make_classe()
    c2 = await make_classe()
    service = ApprenantService(db)

    dto = await service.assign_to_classe(a.id, c1.id)
    assert dto.classe_id == c1.id

    with pytest.raises(ConflictError) as exc_info:
        await service.assign_to_classe(a.id, c2.id)
    assert exc_info.value.details["apprenant_id"] == a.id
    assert exc_info.value.details["current_classe_id"] == c1.id

    # réaffecter à la même classe est aussi refusé
    with pytest.raises(ConflictError):
        await service.assign_to_classe(a.id, c1.id)

    await service.remove_from_classe(a.id, c1.id)
    dto = await service.assign_to_classe(a.id, c2.id)
    assert dto.classe_id == c2.id


async def test_remove_from_other_classe_is_conflict(db, make_apprenant, make_classe):
    a = await make_apprenant()
    ca = await make_classe()
    cb = await make_classe()
    service = ApprenantService(db)
    await service.assign_to_classe(a.id, ca.id)

    with pytest.raises(ConflictError):
        await service.remove_from_classe(a.id, cb.id)

    assert (await service.get(a.id)).classe_id == ca.id


async def test_remove_without_classe_is_conflict(db, make_apprenant, make_classe):
    a = await make_apprenant()
    c = await make_classe()
    with pytest.raises(ConflictError):
        await ApprenantService(db).remove_from_classe(a.id, c.id)


async def test_classe_projection_follows_members(db, make_apprenant, make_formateur, make_classe):
    a1 = await make_apprenant()
    a2 = await make_apprenant()
    f = await make_formateur()
    c = await make_classe()
    service = ClasseService(db)

    await service.assign_apprenant(c.id, a2.id)
    await service.assign_apprenant(c.id, a1.id)
    dto = await service.assign_formateur(c.id, f.id)

    assert dto.apprenant_ids == sorted([a1.id, a2.id])
    assert dto.formateur_ids == [f.id]

    dto = await service.remove_apprenant(c.id, a1.id)
    assert dto.apprenant_ids == [a2.id]


async def test_formateur_single_classe(db, make_formateur, make_classe):
    f = await make_formateur()
    c1 = await make_classe()
    c2 = await make_classe()
    service = FormateurService(db)

    await service.assign_to_classe(f.id, c1.id)
    with pytest.raises(ConflictError):
        await service.assign_to_classe(f.id, c2.id)
    with pytest.raises(ConflictError):
        await service.remove_from_classe(f.id, c2.id)

    dto = await service.remove_from_classe(f.id, c1.id)
    assert dto.classe_id is None


async def test_not_found_names_missing_id(db, make_apprenant):
    a = await make_apprenant()
    relations = RelationService(db)

    with pytest.raises(NotFoundError) as exc_info:
        await relations.assign_apprenant_to_classe(a.id, 999)
    assert exc_info.value.details == {"entity": "Classe", "id": 999}

    with pytest.raises(NotFoundError) as exc_info:
        await relations.assign_apprenant_to_formation(404, 1)
    assert exc_info.value.details == {"entity": "Apprenant", "id": 404}


# --- Formation : inscriptions ---


async def test_capacity_limit(db, make_apprenant, make_formation):
    formation = await make_formation(capacite_min=1, capacite_max=3)
    service = FormationService(db)

    apprenants = [await make_apprenant() for _ in range(4)]
    for a in apprenants[:3]:
        await service.add_apprenant(formation.id, a.id)

    with pytest.raises(ConflictError) as exc_info:
        await service.add_apprenant(formation.id, apprenants[3].id)
    assert exc_info.value.details["capacite_max"] == 3
    assert exc_info.value.details["apprenant_id"] == apprenants[3].id

    dto = await service.get(formation.id)
    assert dto.apprenant_ids == sorted(a.id for a in apprenants[:3])
    assert (await service.is_full(formation.id)).full is True


async def test_reenroll_is_noop(db, make_apprenant, make_formation):
    formation = await make_formation(capacite_max=1)
    a = await make_apprenant()
    service = FormationService(db)

    await service.add_apprenant(formation.id, a.id)
    dto = await service.add_apprenant(formation.id, a.id)

    assert dto.apprenant_ids == [a.id]
    assert (await service.is_full(formation.id)).nb_inscrits == 1


async def test_both_sides_see_enrollment(db, make_apprenant, make_formation):
    formation = await make_formation()
    a = await make_apprenant()

    dto = await ApprenantService(db).assign_to_formation(a.id, formation.id)
    assert dto.formation_ids == [formation.id]
    assert (await FormationService(db).get(formation.id)).apprenant_ids == [a.id]

    assert await ApprenantService(db).remove_from_formation(a.id, formation.id) is True
    assert (await ApprenantService(db).get(a.id)).formation_ids == []
    assert (await FormationService(db).get(formation.id)).apprenant_ids == []


async def test_remove_not_enrolled_returns_false(db, make_apprenant, make_formation):
    formation = await make_formation()
    a = await make_apprenant()
    assert await FormationService(db).remove_apprenant(formation.id, a.id) is False


@pytest.mark.parametrize("statut", [FormationStatus.EN_COURS, FormationStatus.TERMINEE, FormationStatus.ANNULEE])
async def test_membership_frozen_outside_planifiee(db, make_apprenant, make_formateur, make_formation, statut):
    enrolled = await make_apprenant()
    other = await make_apprenant()
    formateur = await make_formateur()

    formation = await make_formation()
    service = FormationService(db)
    await service.add_apprenant(formation.id, enrolled.id)
    for step in {
        FormationStatus.EN_COURS: [FormationStatus.EN_COURS],
        FormationStatus.TERMINEE: [FormationStatus.EN_COURS, FormationStatus.TERMINEE],
        FormationStatus.ANNULEE: [FormationStatus.ANNULEE],
    }[statut]:
        await service.update_status(formation.id, step)

    with pytest.raises(ConflictError):
        await service.add_apprenant(formation.id, other.id)
    with pytest.raises(ConflictError):
        await service.remove_apprenant(formation.id, enrolled.id)
    with pytest.raises(ConflictError):
        await service.assign_formateur(formation.id, formateur.id)

    assert (await service.get(formation.id)).apprenant_ids == [enrolled.id]


# --- Formation : formateur ---


async def test_single_formateur_per_formation(db, make_formateur, make_formation):
    formation = await make_formation()
    f1 = await make_formateur()
    f2 = await make_formateur()
    service = FormationService(db)

    dto = await service.assign_formateur(formation.id, f1.id)
    assert dto.formateur_id == f1.id
    assert (await FormateurService(db).get(f1.id)).formation_ids == [formation.id]

    with pytest.raises(ConflictError) as exc_info:
        await service.assign_formateur(formation.id, f2.id)
    assert exc_info.value.details["current_formateur_id"] == f1.id

    with pytest.raises(ConflictError):
        await service.remove_formateur(formation.id, f2.id)

    dto = await service.remove_formateur(formation.id, f1.id)
    assert dto.formateur_id is None
    assert (await FormateurService(db).get(f1.id)).formation_ids == []


async def test_remove_formateur_after_start_is_conflict(db, make_formateur, make_formation):
    formation = await make_formation()
    f = await make_formateur()
    service = FormationService(db)
    await service.assign_formateur(formation.id, f.id)
    await service.update_status(formation.id, FormationStatus.EN_COURS)

    with pytest.raises(ConflictError) as exc_info:
        await service.remove_formateur(formation.id, f.id)
    assert exc_info.value.details["statut"] == "EN_COURS"
    assert (await service.get(formation.id)).formateur_id == f.id


# --- Statut ---


async def test_status_transitions(db, make_formation):
    formation = await make_formation()
    service = FormationService(db)

    with pytest.raises(IllegalStateTransitionError):
        await service.update_status(formation.id, FormationStatus.TERMINEE)

    await service.update_status(formation.id, FormationStatus.EN_COURS)
    with pytest.raises(IllegalStateTransitionError) as exc_info:
        await service.update_status(formation.id, FormationStatus.PLANIFIEE)
    assert exc_info.value.details["current"] == "EN_COURS"
    assert exc_info.value.details["requested"] == "PLANIFIEE"

    dto = await service.update_status(formation.id, FormationStatus.TERMINEE)
    assert dto.statut == FormationStatus.TERMINEE

    with pytest.raises(IllegalStateTransitionError):
        await service.update_status(formation.id, FormationStatus.ANNULEE)


# --- Unité de travail et concurrence ---


async def _count_inscriptions(session) -> int:
    return (await session.execute(select(func.count()).select_from(Inscription))).scalar_one()


async def test_failed_enrollment_is_rolled_back(db, monkeypatch, make_apprenant, make_formation):
    a = await make_apprenant()
    f = await make_formation()
    save = EntityStore.save

    async def save_then_fail(self, entity):
        await save(self, entity)
        raise RuntimeError("écriture interrompue")

    # l'inscription et l'UPDATE de la formation sont flushés avant l'échec
    monkeypatch.setattr(EntityStore, "save", save_then_fail)
    with pytest.raises(RuntimeError):
        await RelationService(db).assign_apprenant_to_formation(a.id, f.id)
    monkeypatch.undo()

    assert await _count_inscriptions(db) == 0
    assert (await FormationService(db).get(f.id)).apprenant_ids == []
    assert (await ApprenantService(db).get(a.id)).formation_ids == []


async def test_failed_classe_assignment_is_rolled_back(db, monkeypatch, make_apprenant, make_classe):
    a = await make_apprenant()
    c = await make_classe()
    save = EntityStore.save

    async def save_then_fail(self, entity):
        await save(self, entity)
        raise RuntimeError("écriture interrompue")

    monkeypatch.setattr(EntityStore, "save", save_then_fail)
    with pytest.raises(RuntimeError):
        await RelationService(db).assign_apprenant_to_classe(a.id, c.id)
    monkeypatch.undo()

    assert (await ApprenantService(db).get(a.id)).classe_id is None
    assert (await ClasseService(db).get(c.id)).apprenant_ids == []


@pytest_asyncio.fixture
async def file_sessionmaker(tmp_path):
    # une connexion par session : deux sessions concurrentes voient des transactions distinctes
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'concurrence.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def test_concurrent_enrollment_on_last_place(file_sessionmaker):
    async with file_sessionmaker() as setup:
        formation = await FormationService(setup).create(FormationCreate(**formation_payload(capacite_max=1)))
        a1 = await ApprenantService(setup).create(ApprenantCreate(**apprenant_payload(1)))
        a2 = await ApprenantService(setup).create(ApprenantCreate(**apprenant_payload(2)))

    async with file_sessionmaker() as first, file_sessionmaker() as second:
        # la seconde session lit la formation (version 1, aucune place prise)
        store = EntityStore(second)
        stale = await store.get(Formation, formation.id)
        apprenant = await store.get(Apprenant, a2.id)
        assert relationships.ensure_can_enroll(stale, apprenant) is True

        await RelationService(first).assign_apprenant_to_formation(a1.id, formation.id)

        with pytest.raises(StaleDataError):
            async with unit_of_work(second):
                inscription = Inscription()
                stale.inscriptions.append(inscription)
                apprenant.inscriptions.append(inscription)
                stale.touch()
                await store.save(stale)

    async with file_sessionmaker() as check:
        assert await _count_inscriptions(check) == 1
        assert (await FormationService(check).get(formation.id)).apprenant_ids == [a1.id]
