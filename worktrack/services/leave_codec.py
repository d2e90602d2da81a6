"""
Leave annotation codec.

A leave day's category and paid state are packed into the record's
``notes`` as a label, optionally followed by `` - `` and free text::

    "Planned Leave"
    "Unplanned Leave - dentist"
    "Unpaid Leave - extended trip"

Unpaid is a terminal override: once a day is unpaid its category label is
dropped.  Decoding is tolerant of the older composite forms (for instance
``"Planned Leave (Unpaid)"``), which still name the category.

Classification only looks at the label portion (text before the first
separator) so that free text can never change a day's category.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from worktrack.core.exceptions import ValidationError

SEPARATOR = " - "


class LeaveCategory(str, Enum):
    PLANNED = "planned"
    UNPLANNED = "unplanned"
    PARENTAL = "parental"
    OTHER = "other"


QUOTA_CATEGORIES = (LeaveCategory.PLANNED, LeaveCategory.UNPLANNED, LeaveCategory.PARENTAL)

PAID_LABELS = {
    LeaveCategory.PLANNED: "Planned Leave",
    LeaveCategory.UNPLANNED: "Unplanned Leave",
    LeaveCategory.PARENTAL: "Parental Leave",
    LeaveCategory.OTHER: "Leave",
}
UNPAID_LABEL = "Unpaid Leave"

_UNPAID_MARKERS = (UNPAID_LABEL, "(Unpaid)")
# Order matters: "Unplanned" must not be read as "Planned" (case-sensitive)
_CATEGORY_HINTS = (
    ("Planned", LeaveCategory.PLANNED),
    ("Unplanned", LeaveCategory.UNPLANNED),
    ("Parental", LeaveCategory.PARENTAL),
)
_PAID_PRECEDENCE = (LeaveCategory.PLANNED, LeaveCategory.UNPLANNED, LeaveCategory.PARENTAL)

# Wire names used by leave requests ("planned-leave", ...)
REQUEST_TYPES = {
    "planned-leave": LeaveCategory.PLANNED,
    "unplanned-leave": LeaveCategory.UNPLANNED,
    "parental-leave": LeaveCategory.PARENTAL,
}
UNPAID_REQUEST_TYPE = "unpaid-leave"


@dataclass(frozen=True)
class LeaveAnnotation:
    category: LeaveCategory
    is_paid: bool = True
    free_text: str = ""

    @property
    def label(self) -> str:
        return PAID_LABELS[self.category] if self.is_paid else UNPAID_LABEL

    @property
    def display_type(self) -> str:
        """Short type used by the admin leave report, e.g. ``Planned (Unpaid)``."""
        if self.is_paid:
            return self.category.value.capitalize()
        if self.category is LeaveCategory.OTHER:
            return "Unpaid"
        return f"{self.category.value.capitalize()} (Unpaid)"

    def encode(self) -> str:
        return encode(self.category, self.is_paid, self.free_text)


def encode(category: LeaveCategory, is_paid: bool = True, free_text: str | None = None) -> str:
    label = PAID_LABELS[LeaveCategory(category)] if is_paid else UNPAID_LABEL
    text = (free_text or "").strip()
    return f"{label}{SEPARATOR}{text}" if text else label


def decode(note: str | None) -> LeaveAnnotation:
    if not note:
        return LeaveAnnotation(LeaveCategory.OTHER)

    head, sep, tail = note.partition(SEPARATOR)
    recognised = (
        any(marker in head for marker in _UNPAID_MARKERS)
        or any(PAID_LABELS[c] in head for c in QUOTA_CATEGORIES)
        or head.strip() == PAID_LABELS[LeaveCategory.OTHER]
    )
    if sep:
        free_text = tail
    else:
        free_text = "" if recognised else note

    if any(marker in head for marker in _UNPAID_MARKERS):
        category = next(
            (cat for hint, cat in _CATEGORY_HINTS if hint in head),
            LeaveCategory.OTHER,
        )
        return LeaveAnnotation(category, is_paid=False, free_text=free_text)

    for category in _PAID_PRECEDENCE:
        if PAID_LABELS[category] in head:
            return LeaveAnnotation(category, is_paid=True, free_text=free_text)

    return LeaveAnnotation(LeaveCategory.OTHER, is_paid=True, free_text=free_text)


def parse_request_type(value: str | None) -> LeaveCategory:
    """Map a wire leave type to its category (``planned-leave`` or ``planned``)."""
    key = (value or "").strip().lower()
    if key in REQUEST_TYPES:
        return REQUEST_TYPES[key]
    if key in {c.value for c in QUOTA_CATEGORIES}:
        return LeaveCategory(key)
    raise ValidationError(
        "Invalid leave type, expected one of: " + ", ".join(REQUEST_TYPES)
    )
