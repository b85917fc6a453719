from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import InvalidFormatError, MissingFieldError
from app.models import FormationStatus, NiveauFormation
from app.validation import fields


@pytest.mark.parametrize("value", [None, "", "   "])
def test_require_text_missing(value):
    with pytest.raises(MissingFieldError) as exc_info:
        fields.require_text(value, "nom")
    assert exc_info.value.details == {"field": "nom"}
    assert exc_info.value.code == "MISSING_FIELD"


def test_require_text_strips_and_checks_length():
    assert fields.require_text("  Alice ", "nom") == "Alice"
    with pytest.raises(InvalidFormatError):
        fields.require_text("ab", "titre", min_length=3)
    with pytest.raises(InvalidFormatError):
        fields.require_text("x" * 51, "nom", max_length=50)


@pytest.mark.parametrize("email", ["a@b.fr", "Jean.Dupont+test@mail.example.com", "x_y@sub-domain.org"])
def test_valid_emails(email):
    assert fields.validate_email(email) == email.lower()


@pytest.mark.parametrize("email", ["plainaddress", "@nodomain.com", "a@b", "a@@b.com", "a b@c.com"])
def test_invalid_emails(email):
    with pytest.raises(InvalidFormatError) as exc_info:
        fields.validate_email(email)
    assert exc_info.value.code == "INVALID_FORMAT"


def test_missing_email():
    with pytest.raises(MissingFieldError):
        fields.validate_email("  ")


def test_validate_enum():
    assert fields.validate_enum("avance", NiveauFormation, "niveau") == NiveauFormation.AVANCE
    assert fields.validate_enum(FormationStatus.EN_COURS, FormationStatus, "statut") == FormationStatus.EN_COURS
    with pytest.raises(MissingFieldError):
        fields.validate_enum(None, NiveauFormation, "niveau")
    with pytest.raises(InvalidFormatError):
        fields.validate_enum("EXPERT", NiveauFormation, "niveau")


@pytest.mark.parametrize(
    "cmin,cmax,error",
    [
        (None, 5, MissingFieldError),
        (1, None, MissingFieldError),
        (0, 5, InvalidFormatError),
        (1, -1, InvalidFormatError),
        (6, 5, InvalidFormatError),
    ],
)
def test_capacities_rejected(cmin, cmax, error):
    with pytest.raises(error):
        fields.validate_capacities(cmin, cmax)


def test_capacities_equal_accepted():
    fields.validate_capacities(5, 5)


def test_dates():
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    fields.validate_dates(now + timedelta(days=1), now + timedelta(days=2), now=now)
    # égalité acceptée
    fields.validate_dates(now + timedelta(days=1), now + timedelta(days=1), now=now)

    with pytest.raises(MissingFieldError):
        fields.validate_dates(None, now, now=now)
    with pytest.raises(MissingFieldError):
        fields.validate_dates(now, None, now=now)
    with pytest.raises(InvalidFormatError):
        fields.validate_dates(now + timedelta(days=3), now + timedelta(days=2), now=now)
    with pytest.raises(InvalidFormatError):
        fields.validate_dates(now - timedelta(days=1), now + timedelta(days=2), now=now)


def test_past_start_allowed_when_not_creating():
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    fields.validate_dates(now - timedelta(days=5), now + timedelta(days=2), forbid_past=False, now=now)


def test_naive_dates_are_utc():
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    fields.validate_dates(datetime(2030, 1, 2), datetime(2030, 1, 3), now=now)


@pytest.mark.parametrize("value,expected", [("101", "101"), (" 7 ", "7"), ("0999", "999")])
def test_num_salle_valid(value, expected):
    assert fields.validate_num_salle(value) == expected


@pytest.mark.parametrize("value", ["abc", "0", "1000", "-3", "12a", "²", "1²", "١٢"])
def test_num_salle_invalid(value):
    with pytest.raises(InvalidFormatError):
        fields.validate_num_salle(value)
