"""
app.db

Package base de données : connexion, session et helpers d’accès.

- base : Base déclarative + horodatages communs (created_at, updated_at, touch).
- session : engine async, get_db (Depends) et unit_of_work (commit / rollback).
- store : EntityStore, lecture / pagination / recherche génériques.
- migrations : configuration Alembic (côté sync) via DATABASE_URL_SYNC.
"""
