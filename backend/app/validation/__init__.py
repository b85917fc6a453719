"""
app.validation

Couche de validation métier, indépendante du transport HTTP.

- fields : formats et présence des champs (MissingFieldError / InvalidFormatError)
- uniqueness : email et numéro de salle (ConflictError)
- relationships : règles d’intégrité lors des affectations (ConflictError)
- lifecycle : machine à états des formations (IllegalStateTransitionError)
- entities : validateurs create / update par entité
"""
