import pytest

from school_attendance.common.validators import optional_id, optional_mobile, require_email, require_gender, require_id, require_ids
from school_attendance.core.enums import Gender
from school_attendance.core.exceptions import ValidationError


def test_require_ids_collapses_duplicates_in_order():
    assert require_ids([3, "1", 3, 2], "Student IDs") == [3, 1, 2]


@pytest.mark.parametrize("value", [None, [], "1,2", ["x"], 5, {"a": 1}, [True]])
def test_require_ids_rejects(value):
    with pytest.raises(ValidationError):
        require_ids(value, "Student IDs")


def test_mobile_number_is_cleaned():
    assert optional_mobile("+91 98765-43210") == "+919876543210"
    assert optional_mobile("") is None


def test_mobile_number_rejects_landline():
    with pytest.raises(ValidationError):
        optional_mobile("0221234567")


def test_email_and_gender():
    assert require_email("a@b.co") == "a@b.co"
    assert require_gender("Female") == Gender.FEMALE
    with pytest.raises(ValidationError):
        require_email("not-an-email")
    with pytest.raises(ValidationError):
        require_gender("other")


def test_require_id_accepts_numeric_text():
    assert require_id("12", "Class ID") == 12
    assert require_id(7, "Class ID") == 7
    assert optional_id("", "Teacher ID") is None


@pytest.mark.parametrize("value", [None, "", "abc", True, 2.5, [1], {"id": 1}])
def test_require_id_rejects(value):
    with pytest.raises(ValidationError):
        require_id(value, "Class ID")


@pytest.mark.parametrize("value", [9876543210, ["9876543210"]])
def test_mobile_number_must_be_text(value):
    with pytest.raises(ValidationError):
        optional_mobile(value)


@pytest.mark.parametrize("value", [1, None, ["male"]])
def test_gender_must_be_text(value):
    with pytest.raises(ValidationError):
        require_gender(value)


def test_email_must_be_text():
    with pytest.raises(ValidationError):
        require_email(["a@b.co"])
