"""
Unit tests for the class lifecycle and completion billing
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
import uuid

from sqlmodel import Session, select

from teachflow.models import ClassRecord, ClassStatus, Payment, PaymentStatus
from teachflow.services import classes
from teachflow.services.classes import CONTRACTOR_MISSING_WARNING, REFERENCE_NOT_FOUND

from conftest import make_class, make_contractor, make_student


def payments_for(db: Session, class_record: ClassRecord):
    return db.exec(select(Payment).where(Payment.class_id == class_record.id)).all()


class TestCompletionBilling:
    """Completing a class derives exactly one payment"""

    def test_completion_creates_pending_payment(self, db, caller, scheduled_class, contractor, student):
        """Contractor{50, BRL, 30d} completed on 2024-01-01 is due 2024-01-31"""
        result = classes.update_class_status(
            db, caller, scheduled_class.id, "completed", completed_on=date(2024, 1, 1)
        )

        assert result.success is True
        assert result.warnings == []
        assert result.data.status == ClassStatus.COMPLETED

        payment = result.extras["payment"]
        assert payment.amount == Decimal("50.00")
        assert payment.currency == "BRL"
        assert payment.status == PaymentStatus.PENDING
        assert payment.due_date == date(2024, 1, 31)
        assert payment.class_id == scheduled_class.id
        assert payment.student_id == student.id
        assert payment.contractor_id == contractor.id
        assert payment.user_id == caller.id

    def test_completing_twice_creates_one_payment(self, db, caller, scheduled_class):
        first = classes.update_class_status(db, caller, scheduled_class.id, ClassStatus.COMPLETED)
        second = classes.update_class_status(db, caller, scheduled_class.id, ClassStatus.COMPLETED)

        assert first.success and second.success
        assert first.extras["payment"].id == second.extras["payment"].id
        assert len(payments_for(db, scheduled_class)) == 1

    def test_recompleting_after_status_change_keeps_single_payment(self, db, caller, scheduled_class):
        classes.update_class_status(db, caller, scheduled_class.id, "completed")
        classes.update_class_status(db, caller, scheduled_class.id, "scheduled")
        classes.update_class_status(db, caller, scheduled_class.id, "completed")

        assert len(payments_for(db, scheduled_class)) == 1

    def test_custom_rate_overrides_contractor_rate(self, db, caller, user, student, contractor):
        class_record = make_class(db, user, student, contractor, custom_rate=Decimal("72.50"))

        result = classes.update_class_status(db, caller, class_record.id, "completed")

        assert result.extras["payment"].amount == Decimal("72.50")

    def test_amount_is_flat_per_class(self, db, caller, user, student, contractor):
        class_record = make_class(db, user, student, contractor, duration_minutes=90)

        result = classes.update_class_status(db, caller, class_record.id, "completed")

        assert result.extras["payment"].amount == Decimal("50.00")

    def test_currency_and_terms_follow_contractor(self, db, caller, user, student):
        contractor = make_contractor(
            db, user, name="Platform", default_hourly_rate=Decimal("25.00"),
            currency="USD", payment_terms_days=7
        )
        class_record = make_class(db, user, student, contractor)

        result = classes.update_class_status(
            db, caller, class_record.id, "completed", completed_on=date(2024, 2, 25)
        )

        payment = result.extras["payment"]
        assert payment.currency == "USD"
        assert payment.due_date == date(2024, 3, 3)

    @pytest.mark.parametrize("status", ["cancelled", "no_show", "scheduled"])
    def test_other_statuses_do_not_bill(self, db, caller, scheduled_class, status):
        result = classes.update_class_status(db, caller, scheduled_class.id, status)

        assert result.success is True
        assert result.data.status == ClassStatus(status)
        assert result.extras["payment"] is None
        assert payments_for(db, scheduled_class) == []

    def test_notes_are_saved_with_status(self, db, caller, scheduled_class):
        result = classes.update_class_status(
            db, caller, scheduled_class.id, "cancelled", notes="Student travelling"
        )

        assert result.data.class_notes == "Student travelling"

    def test_missing_contractor_completes_with_warning(self, db, caller, other_user, scheduled_class, contractor):
        # Contractor reassigned to another tenant behind the class's back
        contractor.user_id = other_user.id
        db.add(contractor)
        db.commit()

        result = classes.update_class_status(db, caller, scheduled_class.id, "completed")

        assert result.success is True
        assert result.warnings == [CONTRACTOR_MISSING_WARNING]
        assert result.extras["payment"] is None
        assert db.get(ClassRecord, scheduled_class.id).status == ClassStatus.COMPLETED
        assert payments_for(db, scheduled_class) == []

    def test_concurrent_completion_is_absorbed(self, db, caller, user, scheduled_class, monkeypatch):
        """A payment inserted by a racing request wins; ours retries without duplicating"""
        racing_payment = Payment(
            user_id=user.id,
            class_id=scheduled_class.id,
            student_id=scheduled_class.student_id,
            contractor_id=scheduled_class.contractor_id,
            amount=Decimal("50.00"),
            currency="BRL",
            due_date=date(2024, 1, 31),
        )
        db.add(racing_payment)
        db.commit()

        real_lookup = classes._payment_for_class
        calls = {"count": 0}

        def stale_lookup(session, class_record):
            # First check runs before the racing insert is visible
            calls["count"] += 1
            if calls["count"] == 1:
                return None
            return real_lookup(session, class_record)

        monkeypatch.setattr(classes, "_payment_for_class", stale_lookup)

        result = classes.update_class_status(db, caller, scheduled_class.id, "completed")

        assert result.success is True
        assert result.extras["payment"].id == racing_payment.id
        assert db.get(ClassRecord, scheduled_class.id).status == ClassStatus.COMPLETED
        assert len(payments_for(db, scheduled_class)) == 1


class TestStatusUpdateIsolation:
    """Status updates only reach the caller's own classes"""

    def test_foreign_class_is_not_found(self, db, other_caller, scheduled_class):
        result = classes.update_class_status(db, other_caller, scheduled_class.id, "completed")

        assert result.success is False
        assert result.code == "not_found"
        assert result.error == "Class not found"

        db.expire_all()
        assert db.get(ClassRecord, scheduled_class.id).status == ClassStatus.SCHEDULED
        assert payments_for(db, scheduled_class) == []

    def test_unknown_class_is_not_found(self, db, caller):
        result = classes.update_class_status(db, caller, uuid.uuid4(), "completed")

        assert result.code == "not_found"

    def test_malformed_id_is_not_found(self, db, caller):
        result = classes.update_class_status(db, caller, "not-a-uuid", "completed")

        assert result.code == "not_found"

    def test_invalid_status_is_rejected(self, db, caller, scheduled_class):
        result = classes.update_class_status(db, caller, scheduled_class.id, "finished")

        assert result.success is False
        assert result.code == "validation_error"
        assert db.get(ClassRecord, scheduled_class.id).status == ClassStatus.SCHEDULED

    def test_missing_caller_is_unauthenticated(self, db, scheduled_class):
        result = classes.update_class_status(db, None, scheduled_class.id, "completed")

        assert result.code == "unauthenticated"


class TestCreateClass:
    """Class creation verifies every reference"""

    def class_data(self, student_id, contractor_id, **overrides):
        data = {
            "student_id": str(student_id),
            "contractor_id": str(contractor_id),
            "start_time": "2024-03-04T14:00:00",
            "duration_minutes": 45,
        }
        data.update(overrides)
        return data

    def test_create_class(self, db, caller, student, contractor):
        result = classes.create_class(db, caller, self.class_data(student.id, contractor.id))

        assert result.success is True
        class_record = result.data
        assert class_record.status == ClassStatus.SCHEDULED
        assert class_record.user_id == caller.id
        assert class_record.end_time == datetime(2024, 3, 4, 14, 45)

    def test_aware_start_time_is_stored_as_utc(self, db, caller, student, contractor):
        data = self.class_data(student.id, contractor.id, start_time="2024-03-04T10:00:00-03:00")

        result = classes.create_class(db, caller, data)

        assert result.data.start_time == datetime(2024, 3, 4, 13, 0)
        assert result.data.end_time == datetime(2024, 3, 4, 13, 45)

    @pytest.mark.parametrize("foreign", ["student", "contractor", "both"])
    def test_foreign_reference_fails_atomically(
        self, db, caller, student, contractor, foreign_student, foreign_contractor, foreign
    ):
        student_id = foreign_student.id if foreign in ("student", "both") else student.id
        contractor_id = foreign_contractor.id if foreign in ("contractor", "both") else contractor.id

        result = classes.create_class(db, caller, self.class_data(student_id, contractor_id))

        assert result.success is False
        assert result.code == "not_found"
        assert result.error == REFERENCE_NOT_FOUND
        assert db.exec(select(ClassRecord)).all() == []

    def test_invalid_duration_is_rejected(self, db, caller, student, contractor):
        data = self.class_data(student.id, contractor.id, duration_minutes=0)

        result = classes.create_class(db, caller, data)

        assert result.code == "validation_error"
        assert "duration_minutes" in result.error
        assert db.exec(select(ClassRecord)).all() == []


class TestListAndDelete:

    def test_list_is_scoped_and_ordered(self, db, caller, user, other_user, student, contractor,
                                        foreign_student, foreign_contractor):
        later = make_class(db, user, student, contractor, start_time=datetime(2024, 1, 10, 12, 0))
        earlier = make_class(db, user, student, contractor, start_time=datetime(2024, 1, 5, 12, 0))
        make_class(db, other_user, foreign_student, foreign_contractor)

        result = classes.list_classes(db, caller)

        assert [c.id for c in result.data] == [earlier.id, later.id]

    def test_list_filters(self, db, caller, user, student, contractor):
        other_student = make_student(db, user, contractor, name="Bruno")
        make_class(db, user, student, contractor, start_time=datetime(2024, 1, 5, 12, 0))
        target = make_class(
            db, user, other_student, contractor,
            start_time=datetime(2024, 1, 20, 12, 0), status=ClassStatus.COMPLETED
        )

        assert [c.id for c in classes.list_classes(db, caller, student_id=other_student.id).data] == [target.id]
        assert [c.id for c in classes.list_classes(db, caller, status="completed").data] == [target.id]
        assert [c.id for c in classes.list_classes(
            db, caller, start_date=date(2024, 1, 15), end_date=date(2024, 1, 31)
        ).data] == [target.id]

    def test_get_foreign_class_is_not_found(self, db, other_caller, scheduled_class):
        assert classes.get_class(db, other_caller, scheduled_class.id).code == "not_found"

    def test_delete_scheduled_class(self, db, caller, scheduled_class):
        class_id = scheduled_class.id

        result = classes.delete_class(db, caller, class_id)

        assert result.success is True
        assert db.get(ClassRecord, class_id) is None

    def test_delete_billed_class_conflicts(self, db, caller, scheduled_class):
        classes.update_class_status(db, caller, scheduled_class.id, "completed")

        result = classes.delete_class(db, caller, scheduled_class.id)

        assert result.success is False
        assert result.code == "reference_conflict"
        assert db.get(ClassRecord, scheduled_class.id) is not None

    def test_delete_foreign_class_is_not_found(self, db, other_caller, scheduled_class):
        result = classes.delete_class(db, other_caller, scheduled_class.id)

        assert result.code == "not_found"
        assert db.get(ClassRecord, scheduled_class.id) is not None
