from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Type, TypeVar

from app.core.errors import InvalidFormatError, MissingFieldError

"""
Validateurs de champs.

Rôle (fonctionnel) :
- Contrôles de format / présence, sans effet de bord et sans accès base.
- Lèvent MissingFieldError ou InvalidFormatError sur la première règle violée.

Règles :
- textes (nom, prénom, titre, spécialité…) : obligatoires, non vides après trim ;
- email : forme local@domaine.tld ;
- énumérations (niveau, statut) : valeur connue ;
- capacités : entiers > 0, min <= max ;
- dates : présentes, début <= fin, début pas dans le passé (à la création).
"""

EnumT = TypeVar("EnumT", bound=Enum)

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$")

NUM_SALLE_MAX = 999


def require_text(value: str | None, field: str, *, min_length: int = 1, max_length: int | None = None) -> str:
    """Retourne la valeur nettoyée (strip) ou lève l’erreur adaptée."""
    if value is None or not value.strip():
        raise MissingFieldError(field)

    cleaned = value.strip()
    if len(cleaned) < min_length:
        raise InvalidFormatError(field, f"Le champ {field} doit contenir au moins {min_length} caractères")
    if max_length is not None and len(cleaned) > max_length:
        raise InvalidFormatError(field, f"Le champ {field} ne peut pas dépasser {max_length} caractères")
    return cleaned


def validate_email(value: str | None, field: str = "email") -> str:
    if value is None or not value.strip():
        raise MissingFieldError(field)

    cleaned = value.strip()
    if not EMAIL_RE.match(cleaned):
        raise InvalidFormatError(field, "Format d'email invalide")
    return cleaned.lower()


def validate_enum(value: Any, enum_cls: Type[EnumT], field: str) -> EnumT:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(field)
    if isinstance(value, enum_cls):
        return value

    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidFormatError(field, f"Le champ {field} doit valoir : {allowed}") from None


def validate_capacities(capacite_min: int | None, capacite_max: int | None) -> None:
    if capacite_min is None:
        raise MissingFieldError("capacite_min")
    if capacite_max is None:
        raise MissingFieldError("capacite_max")
    if capacite_min <= 0:
        raise InvalidFormatError("capacite_min", "La capacité minimale doit être supérieure à 0")
    if capacite_max <= 0:
        raise InvalidFormatError("capacite_max", "La capacité maximale doit être supérieure à 0")
    if capacite_min > capacite_max:
        raise InvalidFormatError(
            "capacite_min",
            "La capacité minimale ne peut pas être supérieure à la capacité maximale",
        )


def as_utc(value: datetime) -> datetime:
    """Les dates naïves sont considérées en UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_dates(
    date_debut: datetime | None,
    date_fin: datetime | None,
    *,
    forbid_past: bool = True,
    now: datetime | None = None,
) -> None:
    if date_debut is None:
        raise MissingFieldError("date_debut", "La date de début est obligatoire")
    if date_fin is None:
        raise MissingFieldError("date_fin", "La date de fin est obligatoire")

    debut, fin = as_utc(date_debut), as_utc(date_fin)
    if debut > fin:
        raise InvalidFormatError("date_debut", "La date de début ne peut pas être après la date de fin")

    if forbid_past:
        reference = as_utc(now) if now is not None else datetime.now(timezone.utc)
        if debut < reference:
            raise InvalidFormatError("date_debut", "La date de début ne peut pas être dans le passé")


def validate_num_salle(value: str | None) -> str:
    """Numéro de salle : entier 1..999 en chiffres ASCII (stocké en texte, nettoyé)."""
    cleaned = require_text(value, "num_salle")
    if not (cleaned.isascii() and cleaned.isdecimal()):
        raise InvalidFormatError("num_salle", "Le numéro de salle doit être un nombre valide")

    number = int(cleaned)
    if number <= 0:
        raise InvalidFormatError("num_salle", "Le numéro de salle doit être positif")
    if number > NUM_SALLE_MAX:
        raise InvalidFormatError("num_salle", f"Le numéro de salle ne peut pas dépasser {NUM_SALLE_MAX}")
    return str(number)
