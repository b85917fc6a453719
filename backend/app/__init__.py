"""
app

Package racine du backend de gestion du centre de formation.

Rôle (fonctionnel) :
- Contient tout le code applicatif (API, règles métier, accès DB, schémas).
- Sert de point d’ancrage pour les imports : `from app...`

Organisation (haute-level) :
- app.api        : routes FastAPI (contrats HTTP, dépendances, sérialisation)
- app.core       : briques transverses (settings, errors, logs, sécurité, request_id)
- app.db         : base SQLAlchemy, session async, accès générique aux entités
- app.models     : modèles ORM (apprenants, formateurs, classes, formations, inscriptions)
- app.schemas    : schémas Pydantic (entrées/sorties API)
- app.validation : règles de format, d’unicité, de relations et de cycle de vie
- app.services   : cas d’usage (CRUD, recherches, affectations)
"""
