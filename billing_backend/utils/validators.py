from typing import Any

from email_validator import EmailNotValidError
from email_validator import validate_email as _check_email


def is_valid_email(v: Any) -> bool:
    if not isinstance(v, str) or not v.strip():
        return False
    try:
        _check_email(v.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_email(v: str) -> str:
    """Retourne l'e-mail tel que saisi (la casse est conservée) ou lève ValueError."""
    if not is_valid_email(v):
        raise ValueError("Email invalide")
    return v.strip()


def parse_int(v: Any, default: int) -> int:
    """
    Convertit une saisie de formulaire ("3", 3, "", None) en entier.
    Les valeurs vides donnent `default`; les valeurs non numériques lèvent ValueError.
    """
    if v is None or (isinstance(v, str) and not v.strip()):
        return default
    if isinstance(v, bool):
        raise ValueError(f"Entier attendu: {v!r}")
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v)
    return int(str(v).strip())


def lenient_int(v: Any, default: int, minimum: int) -> int:
    """parse_int tolérant: toute saisie invalide retombe sur `default`, puis borne à `minimum`."""
    try:
        value = parse_int(v, default)
    except ValueError:
        value = default
    return max(minimum, value)
