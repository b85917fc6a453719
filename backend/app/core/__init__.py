"""
app.core

Package “cœur” de l’application : ce qui est transversal aux endpoints et aux services,
indépendamment des entités métier (apprenants, formateurs, classes, formations).

- settings
  Configuration centralisée (variables d’environnement, URLs DB, pagination, clé API).

- errors
  Format d’erreur API uniforme (code, message, status, request_id, timestamp, details)
  et hiérarchie des erreurs métier (DomainError et sous-classes).

- logging
  Logs JSON sur stdout, enrichis du request_id et des extras structurés.

- request_id
  Identifiant de corrélation (X-Request-Id) porté par un ContextVar.

- security
  Clé API simple pour les routes d’écriture.
"""
