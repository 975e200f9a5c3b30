"""Tests for ReportService."""

from unittest.mock import patch

import pytest

import repositories.db_models as db_models
from models.exceptions import (
    BackendUnavailableException,
    EmptyCommentException,
    InsufficientPermissionsException,
    MissingLocationException,
    ProfileNotFoundException,
    ReportNotFoundException,
    ValidationException,
)
from models.schemas import ReportCreate
from services.points_service import PointsService
from services.report_service import ReportService, is_correction

Status = db_models.ReportStatus


def _payload(**overrides) -> ReportCreate:
    data = {
        "title": "Tala en el cerro",
        "description": "Cortaron tres pinos esta mañana",
        "category": db_models.ReportCategory.TALA_ILEGAL,
        "latitude": 20.6597,
        "longitude": -103.3496,
    }
    data.update(overrides)
    return ReportCreate(**data)


class TestCreateReport:
    """Tests for filing reports."""

    def test_new_report_is_pending_and_credits_owner(
        self, db_session, citizen, citizen_session
    ):
        """Filing a report stores it as pendiente and credits 10 points."""
        report = ReportService.create_report(db_session, citizen_session, _payload())

        assert report.id is not None
        assert report.status == Status.PENDIENTE
        assert report.user_id == citizen.id
        assert report.priority == db_models.ReportPriority.MEDIA

        db_session.refresh(citizen)
        assert citizen.points == 10

        activities = db_session.query(db_models.Activity).all()
        assert len(activities) == 1
        assert activities[0].activity_type == db_models.ActivityType.REPORTE_VALIDO
        assert activities[0].points_earned == 10
        assert activities[0].user_id == citizen.id

    def test_missing_location_is_rejected_without_side_effects(
        self, db_session, citizen, citizen_session
    ):
        """A report without coordinates is refused and nothing is credited."""
        with pytest.raises(MissingLocationException):
            ReportService.create_report(
                db_session, citizen_session, _payload(latitude=None, longitude=None)
            )

        db_session.refresh(citizen)
        assert citizen.points == 0
        assert db_session.query(db_models.Report).count() == 0
        assert db_session.query(db_models.Activity).count() == 0

    def test_partial_location_is_rejected(self, db_session, citizen_session):
        with pytest.raises(MissingLocationException):
            ReportService.create_report(
                db_session, citizen_session, _payload(longitude=None)
            )

    def test_out_of_range_location_is_rejected(self, db_session, citizen_session):
        with pytest.raises(ValidationException):
            ReportService.create_report(
                db_session, citizen_session, _payload(latitude=95.0)
            )

    def test_blank_title_is_rejected(self, db_session, citizen_session):
        with pytest.raises(ValidationException):
            ReportService.create_report(
                db_session, citizen_session, _payload(title="   ")
            )

    def test_report_kept_when_points_credit_fails(
        self, db_session, citizen, citizen_session
    ):
        """The report survives a failed credit; the credit is retried once."""
        with patch(
            "services.report_service.PointsService.record_activity",
            side_effect=BackendUnavailableException("down"),
        ) as record:
            report = ReportService.create_report(
                db_session, citizen_session, _payload()
            )

        assert record.call_count == 2
        assert db_session.query(db_models.Report).filter_by(id=report.id).count() == 1
        db_session.refresh(citizen)
        assert citizen.points == 0

    def test_failed_credit_is_visible_and_recoverable(
        self, db_session, citizen, citizen_session
    ):
        with patch(
            "services.report_service.PointsService.record_activity",
            side_effect=BackendUnavailableException("down"),
        ):
            report = ReportService.create_report(
                db_session, citizen_session, _payload()
            )

        owed = PointsService.reconcile_points(db_session, citizen.id)
        assert owed.uncredited_reports == [report.id]
        assert owed.expected == 10
        assert owed.drift == -10

        repaired = PointsService.credit_missing_reports(db_session, citizen.id)

        assert repaired.stored == 10
        assert repaired.drift == 0
        assert repaired.uncredited_reports == []
        activity = db_session.query(db_models.Activity).one()
        assert activity.report_id == report.id

    def test_credit_is_linked_to_report(self, db_session, citizen_session):
        report = ReportService.create_report(db_session, citizen_session, _payload())

        activity = db_session.query(db_models.Activity).one()
        assert activity.report_id == report.id
        assert activity.activity_type == db_models.ActivityType.REPORTE_VALIDO

    def test_each_report_credits_again(self, db_session, citizen, citizen_session):
        ReportService.create_report(db_session, citizen_session, _payload())
        ReportService.create_report(db_session, citizen_session, _payload(title="Otra"))

        db_session.refresh(citizen)
        assert citizen.points == 20


class TestListReports:
    """Tests for report listings."""

    def test_newest_first_with_author_name(self, db_session, citizen_session, citizen):
        first = ReportService.create_report(db_session, citizen_session, _payload())
        second = ReportService.create_report(
            db_session, citizen_session, _payload(title="Segundo")
        )

        reports = ReportService.list_reports(db_session)

        assert [r.id for r in reports] == [second.id, first.id]
        assert reports[0].author_name == citizen.full_name

    def test_filters_by_status_and_category(
        self, db_session, test_report, admin_session
    ):
        ReportService.post_update(
            db_session, admin_session, test_report.id, "En camino", Status.EN_PROCESO
        )

        assert ReportService.list_reports(db_session, status=Status.PENDIENTE) == []
        assert len(ReportService.list_reports(db_session, status=Status.EN_PROCESO)) == 1
        assert (
            ReportService.list_reports(
                db_session, category=db_models.ReportCategory.CONTAMINACION
            )
            == []
        )

    def test_owner_listing_only_has_own_reports(
        self, db_session, test_report, other_session
    ):
        assert ReportService.list_reports_for_owner(db_session, other_session) == []

    def test_get_report_not_found(self, db_session):
        with pytest.raises(ReportNotFoundException):
            ReportService.get_report(db_session, 99999)


class TestPostUpdate:
    """Tests for comments and status transitions."""

    def test_owner_can_comment(self, db_session, test_report, citizen_session):
        update = ReportService.post_update(
            db_session, citizen_session, test_report.id, "Sigue igual"
        )

        assert update.comment == "Sigue igual"
        assert update.status is None
        assert update.is_correction is False

    def test_status_from_citizen_is_ignored(
        self, db_session, test_report, citizen_session
    ):
        """A citizen cannot move their own report forward."""
        update = ReportService.post_update(
            db_session, citizen_session, test_report.id, "Ya lo limpiaron", Status.RESUELTO
        )

        db_session.refresh(test_report)
        assert test_report.status == Status.PENDIENTE
        assert test_report.resolved_at is None
        assert update.status is None

    def test_stranger_cannot_comment(self, db_session, test_report, other_session):
        with pytest.raises(InsufficientPermissionsException):
            ReportService.post_update(
                db_session, other_session, test_report.id, "No es mío"
            )
        assert db_session.query(db_models.ReportUpdate).count() == 0

    def test_admin_status_change_is_audited(
        self, db_session, test_report, admin_session
    ):
        """Status and audit row are written together."""
        update = ReportService.post_update(
            db_session, admin_session, test_report.id, "Cuadrilla enviada", Status.EN_PROCESO
        )

        db_session.refresh(test_report)
        assert test_report.status == Status.EN_PROCESO
        assert update.status == Status.EN_PROCESO
        assert update.previous_status == Status.PENDIENTE
        assert update.is_correction is False

    def test_resolving_sets_resolved_at(self, db_session, test_report, admin_session):
        ReportService.post_update(
            db_session, admin_session, test_report.id, "Limpio", Status.RESUELTO
        )

        db_session.refresh(test_report)
        assert test_report.status == Status.RESUELTO
        assert test_report.resolved_at is not None

    def test_reopening_is_flagged_as_correction(
        self, db_session, test_report, admin_session
    ):
        """Moving back from resuelto is allowed, flagged, and clears resolved_at."""
        ReportService.post_update(
            db_session, admin_session, test_report.id, "Limpio", Status.RESUELTO
        )
        update = ReportService.post_update(
            db_session, admin_session, test_report.id, "Volvió la basura", Status.EN_PROCESO
        )

        db_session.refresh(test_report)
        assert test_report.status == Status.EN_PROCESO
        assert test_report.resolved_at is None
        assert update.is_correction is True
        assert update.previous_status == Status.RESUELTO

    def test_same_status_is_not_a_change(self, db_session, test_report, admin_session):
        update = ReportService.post_update(
            db_session, admin_session, test_report.id, "Revisando", Status.PENDIENTE
        )
        assert update.status is None

    def test_empty_comment_is_checked_first(self, db_session, citizen_session):
        """A blank comment fails before the report is even looked up."""
        with pytest.raises(EmptyCommentException):
            ReportService.post_update(db_session, citizen_session, 99999, "   ")

    def test_unknown_report(self, db_session, citizen_session):
        with pytest.raises(ReportNotFoundException):
            ReportService.post_update(db_session, citizen_session, 99999, "Hola")

    def test_updates_are_listed_newest_first(
        self, db_session, test_report, citizen_session, admin_session, municipal_admin
    ):
        ReportService.post_update(db_session, citizen_session, test_report.id, "Primero")
        ReportService.post_update(
            db_session, admin_session, test_report.id, "Segundo", Status.EN_PROCESO
        )

        updates = ReportService.list_updates(db_session, test_report.id)

        assert [u.comment for u in updates] == ["Segundo", "Primero"]
        assert updates[0].author_name == municipal_admin.full_name

    def test_list_updates_unknown_report(self, db_session):
        with pytest.raises(ReportNotFoundException):
            ReportService.list_updates(db_session, 99999)


class TestAssignReport:
    """Tests for assigning reports to administrators."""

    def test_admin_assigns_to_admin(
        self, db_session, test_report, admin_session, super_admin
    ):
        report = ReportService.assign_report(
            db_session, admin_session, test_report.id, super_admin.id
        )
        assert report.assigned_to == super_admin.id

    def test_citizen_cannot_assign(
        self, db_session, test_report, citizen_session, municipal_admin
    ):
        with pytest.raises(InsufficientPermissionsException):
            ReportService.assign_report(
                db_session, citizen_session, test_report.id, municipal_admin.id
            )

    def test_assignee_must_be_admin(
        self, db_session, test_report, admin_session, other_citizen
    ):
        with pytest.raises(ValidationException):
            ReportService.assign_report(
                db_session, admin_session, test_report.id, other_citizen.id
            )

    def test_unknown_assignee(self, db_session, test_report, admin_session):
        with pytest.raises(ProfileNotFoundException):
            ReportService.assign_report(db_session, admin_session, test_report.id, 99999)

    def test_assigned_summary_counts(
        self, db_session, test_report, admin_session, municipal_admin
    ):
        ReportService.assign_report(
            db_session, admin_session, test_report.id, municipal_admin.id
        )
        ReportService.post_update(
            db_session, admin_session, test_report.id, "Hecho", Status.RESUELTO
        )

        summary = ReportService.assigned_summary(db_session, admin_session)

        assert summary.total_assigned == 1
        assert summary.resolved == 1
        assert summary.in_progress == 0


class TestIsCorrection:
    """Tests for the transition direction check."""

    @pytest.mark.parametrize(
        "current,new",
        [
            (Status.PENDIENTE, Status.EN_PROCESO),
            (Status.PENDIENTE, Status.RESUELTO),
            (Status.PENDIENTE, Status.RECHAZADO),
            (Status.EN_PROCESO, Status.RESUELTO),
            (Status.EN_PROCESO, Status.RECHAZADO),
        ],
    )
    def test_forward_transitions(self, current, new):
        assert is_correction(current, new) is False

    @pytest.mark.parametrize(
        "current,new",
        [
            (Status.RESUELTO, Status.EN_PROCESO),
            (Status.RESUELTO, Status.PENDIENTE),
            (Status.RECHAZADO, Status.PENDIENTE),
            (Status.EN_PROCESO, Status.PENDIENTE),
            (Status.RESUELTO, Status.RECHAZADO),
        ],
    )
    def test_backward_transitions(self, current, new):
        assert is_correction(current, new) is True
