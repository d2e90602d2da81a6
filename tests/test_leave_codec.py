"""Tests for the leave annotation codec."""

import pytest

from worktrack.core.exceptions import ValidationError
from worktrack.services.leave_codec import (LeaveAnnotation, LeaveCategory,
                                            decode, encode,
                                            parse_request_type)


def test_encode_paid_labels():
    assert encode(LeaveCategory.PLANNED) == "Planned Leave"
    assert encode(LeaveCategory.UNPLANNED, True, "dentist") == "Unplanned Leave - dentist"
    assert encode(LeaveCategory.PARENTAL, True, "   ") == "Parental Leave"


def test_unpaid_replaces_category_label():
    """Unpaid is a terminal override; the category label is dropped."""
    assert encode(LeaveCategory.PLANNED, False) == "Unpaid Leave"
    assert encode(LeaveCategory.PLANNED, False, "trip") == "Unpaid Leave - trip"


@pytest.mark.parametrize(
    "category",
    [LeaveCategory.PLANNED, LeaveCategory.UNPLANNED, LeaveCategory.PARENTAL],
)
@pytest.mark.parametrize("free_text", ["", "family event - part 2"])
def test_paid_round_trip(category, free_text):
    assert decode(encode(category, True, free_text)) == LeaveAnnotation(category, True, free_text)


def test_unpaid_round_trip_keeps_text():
    decoded = decode(encode(LeaveCategory.OTHER, False, "long trip"))
    assert decoded == LeaveAnnotation(LeaveCategory.OTHER, False, "long trip")


def test_legacy_composite_unpaid_keeps_category():
    decoded = decode("Planned Leave (Unpaid) - visa delay")
    assert decoded.category is LeaveCategory.PLANNED
    assert decoded.is_paid is False
    assert decoded.free_text == "visa delay"


def test_unplanned_is_not_read_as_planned():
    assert decode("Unplanned Leave").category is LeaveCategory.UNPLANNED
    assert decode("Unplanned (Unpaid)").category is LeaveCategory.UNPLANNED


def test_free_text_cannot_change_category():
    decoded = decode("Planned Leave - covering Unpaid Leave of a colleague")
    assert decoded == LeaveAnnotation(
        LeaveCategory.PLANNED, True, "covering Unpaid Leave of a colleague"
    )


def test_unlabelled_note_is_other_paid():
    assert decode("sick") == LeaveAnnotation(LeaveCategory.OTHER, True, "sick")
    assert decode(None) == LeaveAnnotation(LeaveCategory.OTHER, True, "")
    assert decode("Leave") == LeaveAnnotation(LeaveCategory.OTHER, True, "")


def test_display_types():
    assert LeaveAnnotation(LeaveCategory.PLANNED).display_type == "Planned"
    assert LeaveAnnotation(LeaveCategory.PARENTAL, False).display_type == "Parental (Unpaid)"
    assert LeaveAnnotation(LeaveCategory.OTHER, False).display_type == "Unpaid"


def test_parse_request_type():
    assert parse_request_type("planned-leave") is LeaveCategory.PLANNED
    assert parse_request_type("Parental") is LeaveCategory.PARENTAL
    with pytest.raises(ValidationError):
        parse_request_type("sabbatical")
    with pytest.raises(ValidationError):
        parse_request_type(None)
