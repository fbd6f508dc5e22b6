"""
Unit tests for student management
"""

import pytest

from sqlmodel import select

from teachflow.models import Student, StudentStatus
from teachflow.services import students

from conftest import make_class, make_student


def test_create_private_student(db, caller):
    result = students.create_student(db, caller, {"name": "Lucas"})

    assert result.success is True
    assert result.data.contractor_id is None
    assert result.data.status == StudentStatus.ACTIVE
    assert result.data.user_id == caller.id


def test_create_student_with_foreign_contractor_fails(db, caller, foreign_contractor):
    result = students.create_student(
        db, caller, {"name": "Lucas", "contractor_id": str(foreign_contractor.id)}
    )

    assert result.code == "not_found"
    assert result.error == "Contractor not found"
    assert db.exec(select(Student).where(Student.name == "Lucas")).all() == []


def test_package_starts_full(db, caller, contractor):
    result = students.create_student(db, caller, {
        "name": "Lucas",
        "contractor_id": str(contractor.id),
        "package_details": {
            "total_classes": 10,
            "value_per_package": "450.00",
            "expires_at": "2024-12-31",
        },
    })

    package = result.data.package_details
    assert package["remaining_classes"] == 10
    assert package["value_per_package"] == "450.00"
    assert package["expires_at"] == "2024-12-31"


def test_package_remaining_cannot_exceed_total(db, caller):
    result = students.create_student(db, caller, {
        "name": "Lucas",
        "package_details": {"total_classes": 4, "remaining_classes": 5, "value_per_package": "100"},
    })

    assert result.code == "validation_error"
    assert "remaining_classes" in result.error


def test_invalid_status_is_rejected(db, caller):
    result = students.create_student(db, caller, {"name": "Lucas", "status": "graduated"})

    assert result.code == "validation_error"


def test_list_students_filters(db, caller, user, contractor, student, foreign_student):
    lead = make_student(db, user, None, name="Pedro Lead", email="pedro@mail.com", status=StudentStatus.LEAD)

    assert {s.id for s in students.list_students(db, caller).data} == {student.id, lead.id}
    assert [s.id for s in students.list_students(db, caller, status="lead").data] == [lead.id]
    assert [s.id for s in students.list_students(db, caller, contractor_id=contractor.id).data] == [student.id]


@pytest.mark.parametrize("term", ["ana", "ANA@EXAMPLE", "Souza"])
def test_search_matches_name_or_email(db, caller, student, term):
    result = students.list_students(db, caller, search=term)

    assert [s.id for s in result.data] == [student.id]


def test_get_student_detail(db, caller, user, student, contractor):
    make_class(db, user, student, contractor)

    result = students.get_student(db, caller, student.id)

    assert result.data["name"] == "Ana Souza"
    assert result.data["class_count"] == 1
    assert result.data["payment_count"] == 0
    assert len(result.data["recent_classes"]) == 1
    assert result.data["recent_payments"] == []


def test_update_student_to_private(db, caller, student):
    result = students.update_student(db, caller, student.id, {"contractor_id": None, "status": "paused"})

    assert result.success is True
    assert result.data.contractor_id is None
    assert result.data.status == StudentStatus.PAUSED
    assert result.data.name == "Ana Souza"


def test_update_student_with_foreign_contractor_fails(db, caller, student, contractor, foreign_contractor):
    result = students.update_student(db, caller, student.id, {"contractor_id": str(foreign_contractor.id)})

    assert result.code == "not_found"
    db.expire_all()
    assert db.get(Student, student.id).contractor_id == contractor.id


def test_get_foreign_student_is_not_found(db, other_caller, student):
    assert students.get_student(db, other_caller, student.id).code == "not_found"


def test_delete_student_with_classes_fails(db, caller, scheduled_class, student):
    result = students.delete_student(db, caller, student.id)

    assert result.code == "reference_conflict"
    assert db.get(Student, student.id) is not None


def test_delete_student(db, caller, student):
    student_id = student.id

    assert students.delete_student(db, caller, student_id).success is True
    assert db.get(Student, student_id) is None


def test_update_package_keeps_defaults(db, caller, student):
    """A package replaced on update matches the same package saved on create"""
    package = {"total_classes": 10, "value_per_package": "500.00"}

    updated = students.update_student(db, caller, student.id, {"package_details": package})
    created = students.create_student(db, caller, {"name": "Twin", "package_details": package})

    assert updated.success is True
    assert updated.data.package_details == created.data.package_details
    assert updated.data.package_details["currency"] == "BRL"
    assert updated.data.package_details["remaining_classes"] == 10
    assert "classes_per_week" in updated.data.package_details
