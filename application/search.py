"""Free-text search over an already fetched date-slice"""
import re
import unicodedata
from typing import List, Sequence

from domain.entities import Reservation

_NON_DIGITS = re.compile(r"\D")


def normalize_text(text: str) -> str:
    """Lower-case and strip diacritics ("João" -> "joao")"""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def digits_only(text: str) -> str:
    return _NON_DIGITS.sub("", text or "")


def matches(reservation: Reservation, term: str, term_digits: str) -> bool:
    if term in normalize_text(reservation.customer_name):
        return True
    if term_digits and term_digits in digits_only(reservation.phone):
        return True
    code = reservation.confirmation_code
    return bool(code) and term in code


def filter_reservations(reservations: Sequence[Reservation], query: str) -> Sequence[Reservation]:
    """Reservations matching a query by name, phone digits or locator code.

    A blank query returns the input untouched. Order is preserved.
    """
    if not query or not query.strip():
        return reservations

    term = normalize_text(query)
    term_digits = digits_only(query)
    return [r for r in reservations if matches(r, term, term_digits)]
