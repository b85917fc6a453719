from __future__ import annotations

from typing import Dict, FrozenSet

from app.core.errors import ConflictError, IllegalStateTransitionError
from app.models.enums import FormationStatus

"""
Machine à états du cycle de vie d’une formation.

    PLANIFIEE --> EN_COURS --> TERMINEE
        |            |
        +----------> ANNULEE <-+

- PLANIFIEE est l’état initial ; TERMINEE et ANNULEE sont terminaux.
- Pas de retour EN_COURS -> PLANIFIEE, pas de saut PLANIFIEE -> TERMINEE.
- Une transition vers l’état courant n’est pas une transition : elle est refusée.

La table TRANSITIONS est l’unique source de vérité. L’ouverture aux inscriptions
(statut PLANIFIEE) est un contrôle distinct : `ensure_membership_open`.
"""

S = FormationStatus

TRANSITIONS: Dict[FormationStatus, FrozenSet[FormationStatus]] = {
    S.PLANIFIEE: frozenset({S.EN_COURS, S.ANNULEE}),
    S.EN_COURS: frozenset({S.TERMINEE, S.ANNULEE}),
    S.TERMINEE: frozenset(),
    S.ANNULEE: frozenset(),
}

TERMINAL_STATES: FrozenSet[FormationStatus] = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

INITIAL_STATE = S.PLANIFIEE


def is_terminal(status: FormationStatus) -> bool:
    return status in TERMINAL_STATES


def can_transition(current: FormationStatus, requested: FormationStatus) -> bool:
    return requested in TRANSITIONS[current]


def _rejection_message(current: FormationStatus, requested: FormationStatus) -> str:
    if is_terminal(current):
        return "Impossible de modifier une formation terminée ou annulée"
    if current == requested:
        return f"La formation est déjà au statut {current.value}"
    if current == S.EN_COURS and requested == S.PLANIFIEE:
        return "Impossible de remettre en planification une formation en cours"
    if current == S.PLANIFIEE and requested == S.TERMINEE:
        return "Une formation planifiée doit d'abord passer en cours avant d'être terminée"
    return f"Transition de statut interdite : {current.value} -> {requested.value}"


def ensure_transition(current: FormationStatus, requested: FormationStatus, **details) -> None:
    """Lève IllegalStateTransitionError (statut courant + demandé) si la table refuse."""
    if not can_transition(current, requested):
        raise IllegalStateTransitionError(current, requested, _rejection_message(current, requested), **details)


def ensure_membership_open(status: FormationStatus, action: str, **details) -> None:
    """Les inscriptions / affectations ne changent que tant que la formation est PLANIFIEE."""
    if status != S.PLANIFIEE:
        raise ConflictError(
            f"{action} n'est possible que pour une formation planifiée (statut actuel : {status.value})",
            statut=status.value,
            **details,
        )
