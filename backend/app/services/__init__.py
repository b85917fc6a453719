"""
app.services

Package “services” : logique applicative (use-cases) indépendante des endpoints HTTP.

Rôle (fonctionnel) :
- Un service par entité (apprenants, formateurs, classes, formations) :
  CRUD, pagination, recherche, consultation.
- RelationService : affectations / inscriptions / statut, chacune dans une unité de travail.
- mappers : conversion entité <-> DTO.

Principe :
- app.api = transport HTTP (routes, dépendances, codes de réponse)
- app.services = orchestration métier (réutilisable, testable)
- app.validation = règles (champs, unicité, relations, cycle de vie)
- app.models / app.schemas = persistance et contrats
"""
