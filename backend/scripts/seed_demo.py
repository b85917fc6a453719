# backend/scripts/seed_demo.py
from __future__ import annotations

import argparse
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import sessionmaker

# Permet de lancer le script depuis backend/ sans souci d'import
BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

from app.core.settings import settings
from app.models import (
    Apprenant,
    Classe,
    Formateur,
    Formation,
    FormationStatus,
    Inscription,
    NiveauFormation,
)

"""
Jeu de données de démo.

Rôle (fonctionnel) :
- Remplit une base vide avec des classes, formateurs, apprenants et formations
  cohérents avec les règles métier :
  - au plus une classe par apprenant / formateur,
  - au plus un formateur par formation,
  - inscriptions uniquement sur des formations PLANIFIEE, dans la limite de capacite_max.
- Utilise l’URL synchrone (DATABASE_URL_SYNC), comme Alembic.

Usage :
    python scripts/seed_demo.py --reset --apprenants 120 --formations 25
"""

PRENOMS = [
    "Camille", "Léa", "Hugo", "Lucas", "Manon", "Inès", "Nathan", "Chloé", "Yanis", "Sarah",
    "Louis", "Jade", "Adam", "Emma", "Rayan", "Zoé", "Mathis", "Lina", "Noah", "Clara",
]
NOMS = [
    "Martin", "Bernard", "Dubois", "Thomas", "Robert", "Richard", "Petit", "Durand", "Leroy", "Moreau",
    "Simon", "Laurent", "Lefebvre", "Michel", "Garcia", "David", "Bertrand", "Roux", "Vincent", "Fournier",
]

# Spécialité -> titres de formation plausibles
CATALOGUE = {
    "Développement Java": ["Java Basics", "Spring Boot avancé", "Tests avec JUnit"],
    "Python": ["Python pour débutants", "FastAPI en production", "Data analyse avec pandas"],
    "Réseaux": ["Fondamentaux TCP/IP", "Administration Cisco", "Sécurité réseau"],
    "Bases de données": ["SQL essentiel", "PostgreSQL avancé", "Modélisation de données"],
    "Gestion de projet": ["Méthodes agiles", "Scrum Master", "Piloter un projet IT"],
}

CLASSES = ["Alpha", "Bêta", "Gamma", "Delta", "Epsilon", "Zêta", "Sigma", "Oméga"]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _email(prenom: str, nom: str, i: int, domain: str) -> str:
    local = f"{prenom}.{nom}".lower().replace("é", "e").replace("è", "e").replace("ï", "i").replace("ô", "o")
    return f"{local}.{i}@{domain}"


def _formation_dates(statut: FormationStatus) -> tuple[datetime, datetime]:
    """Dates cohérentes avec le statut (futur si PLANIFIEE, passé si TERMINEE)."""
    if statut == FormationStatus.PLANIFIEE:
        debut = now_utc() + timedelta(days=random.randint(7, 120))
    elif statut == FormationStatus.EN_COURS:
        debut = now_utc() - timedelta(days=random.randint(1, 10))
    else:
        debut = now_utc() - timedelta(days=random.randint(30, 180))
    return debut, debut + timedelta(days=random.randint(2, 30))


def seed(reset: bool, n_apprenants: int, n_formations: int) -> None:
    engine = create_engine(settings.DATABASE_URL_SYNC, future=True)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    with SessionLocal() as db:
        if reset:
            # ordre inverse des FK
            db.execute(delete(Inscription))
            db.execute(delete(Formation))
            db.execute(delete(Apprenant))
            db.execute(delete(Formateur))
            db.execute(delete(Classe))
            db.commit()
            print("✅ Reset done (all demo data deleted).")

        classes = [Classe(nom=f"Classe {nom}", num_salle=str(100 + i)) for i, nom in enumerate(CLASSES, start=1)]
        db.add_all(classes)
        db.flush()

        formateurs = []
        for i, specialite in enumerate(sorted(CATALOGUE) * 2, start=1):
            prenom, nom = random.choice(PRENOMS), random.choice(NOMS)
            formateur = Formateur(
                nom=nom,
                prenom=prenom,
                email=_email(prenom, nom, i, "formateurs.example.com"),
                specialite=specialite,
                classe_id=random.choice([None, random.choice(classes).id]),
            )
            formateurs.append(formateur)
        db.add_all(formateurs)
        db.flush()

        apprenants = []
        for i in range(1, n_apprenants + 1):
            prenom, nom = random.choice(PRENOMS), random.choice(NOMS)
            apprenants.append(
                Apprenant(
                    nom=nom,
                    prenom=prenom,
                    email=_email(prenom, nom, i, "apprenants.example.com"),
                    niveau=random.choice(list(NiveauFormation)),
                    classe_id=random.choice(classes).id if random.random() < 0.8 else None,
                )
            )
        db.add_all(apprenants)
        db.flush()

        # Les inscriptions sont posées pendant la planification, avant tout changement de statut
        inscriptions_count = 0
        statuts = [FormationStatus.PLANIFIEE] * 6 + [FormationStatus.EN_COURS] * 2 + [
            FormationStatus.TERMINEE,
            FormationStatus.ANNULEE,
        ]
        for _ in range(n_formations):
            formateur = random.choice(formateurs)
            statut = random.choice(statuts)
            capacite_max = random.randint(5, 20)
            debut, fin = _formation_dates(statut)

            formation = Formation(
                titre=random.choice(CATALOGUE[formateur.specialite]),
                niveau=random.choice(list(NiveauFormation)),
                prerequis=None,
                capacite_min=random.randint(1, min(5, capacite_max)),
                capacite_max=capacite_max,
                date_debut=debut,
                date_fin=fin,
                statut=FormationStatus.PLANIFIEE,
                formateur_id=formateur.id if random.random() < 0.85 else None,
            )
            db.add(formation)
            db.flush()

            for apprenant in random.sample(apprenants, k=random.randint(0, min(capacite_max, len(apprenants)))):
                inscription = Inscription()
                formation.inscriptions.append(inscription)
                apprenant.inscriptions.append(inscription)
                inscriptions_count += 1

            formation.statut = statut
            db.flush()

        db.commit()

        # petit résumé
        total = db.execute(select(func.count()).select_from(Formation)).scalar_one()
        print("✅ Seed terminé.")
        print(f"   - Classes: {len(classes)}")
        print(f"   - Formateurs: {len(formateurs)}")
        print(f"   - Apprenants: {len(apprenants)}")
        print(f"   - Formations (total en base): {total}")
        print(f"   - Inscriptions créées: {inscriptions_count}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="Supprime les données demo avant de reseed")
    parser.add_argument("--apprenants", type=int, default=120, help="Nombre d'apprenants à générer")
    parser.add_argument("--formations", type=int, default=25, help="Nombre de formations à générer")
    args = parser.parse_args()

    seed(reset=args.reset, n_apprenants=args.apprenants, n_formations=args.formations)


if __name__ == "__main__":
    main()
