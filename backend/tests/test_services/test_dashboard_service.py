"""Tests for the dashboard aggregation."""

from datetime import datetime, timedelta
from itertools import count
from types import SimpleNamespace

import pytest

import repositories.db_models as db_models
from models.exceptions import InsufficientPermissionsException
from services.dashboard_service import (
    DashboardService,
    aggregate_reports,
    category_percentages,
)

Status = db_models.ReportStatus
Category = db_models.ReportCategory

_ids = count(1)
_BASE_TIME = datetime(2024, 5, 1, 12, 0)


def _report(status, category):
    report_id = next(_ids)
    created = _BASE_TIME + timedelta(minutes=report_id)
    return SimpleNamespace(
        id=report_id,
        user_id=1,
        title=f"Reporte {report_id}",
        description="Descripción",
        category=category,
        status=status,
        priority=db_models.ReportPriority.MEDIA,
        latitude=19.43,
        longitude=-99.13,
        address=None,
        assigned_to=None,
        resolved_at=None,
        created_at=created,
        updated_at=created,
        author_name="Ana",
    )


class TestAggregateReports:
    """The aggregation is a pure function of the reports it is given."""

    def test_empty_set(self):
        stats = aggregate_reports([], total_users=3)

        assert stats.total == 0
        assert stats.pendiente == 0
        assert stats.resuelto == 0
        assert stats.total_users == 3
        assert set(stats.categories) == {c.value for c in Category}
        assert all(v == 0.0 for v in stats.category_percentages.values())

    def test_counts_by_status_and_category(self):
        reports = [
            _report(Status.PENDIENTE, Category.BASURA),
            _report(Status.PENDIENTE, Category.BASURA),
            _report(Status.EN_PROCESO, Category.CONTAMINACION),
            _report(Status.RESUELTO, Category.TALA_ILEGAL),
        ]

        stats = aggregate_reports(reports, total_users=2)

        assert stats.total == 4
        assert stats.pendiente == 2
        assert stats.en_proceso == 1
        assert stats.resuelto == 1
        assert stats.rechazado == 0
        assert stats.categories["basura"] == 2
        assert stats.categories["mal_uso_espacios"] == 0
        assert stats.category_percentages["basura"] == 50.0
        assert stats.category_percentages["contaminacion"] == 25.0

    def test_status_counts_sum_to_total(self):
        reports = [
            _report(status, Category.BASURA) for status in Status for _ in range(2)
        ]

        stats = aggregate_reports(reports, total_users=0)

        assert (
            stats.pendiente + stats.en_proceso + stats.resuelto + stats.rechazado
            == stats.total
        )

    def test_recent_reports_are_newest_first_and_limited(self):
        reports = [_report(Status.PENDIENTE, Category.BASURA) for _ in range(5)]

        stats = aggregate_reports(reports, total_users=1, recent_limit=3)

        assert stats.total == 5
        assert [r.id for r in stats.recent_reports] == [
            reports[4].id,
            reports[3].id,
            reports[2].id,
        ]

    def test_zero_recent_limit(self):
        reports = [_report(Status.RESUELTO, Category.BASURA)]

        stats = aggregate_reports(reports, total_users=1, recent_limit=0)

        assert stats.recent_reports == []

    def test_percentages_round_to_one_decimal(self):
        assert category_percentages({"basura": 1}, 3)["basura"] == 33.3


class TestGetStats:
    def test_admin_sees_live_counts(
        self, db_session, test_report, admin_session, citizen, municipal_admin
    ):
        stats = DashboardService.get_stats(db_session, admin_session)

        assert stats.total == 1
        assert stats.pendiente == 1
        assert stats.total_users == 2
        assert stats.recent_reports[0].id == test_report.id
        assert stats.recent_reports[0].author_name == citizen.full_name

    def test_citizen_is_refused(self, db_session, citizen_session):
        with pytest.raises(InsufficientPermissionsException):
            DashboardService.get_stats(db_session, citizen_session)
