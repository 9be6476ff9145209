from datetime import datetime, timedelta
from pathlib import Path

import pytest

from check_scam.domain.models import ReportStatus, RiskLevel, ScamReport
from check_scam.exceptions import ReportNotFoundError
from check_scam.repository import ReportManager, SQLiteReportRepository


@pytest.fixture
def manager(tmp_path: Path) -> ReportManager:
    return ReportManager(SQLiteReportRepository(str(tmp_path / "reports.sqlite")))


def _report(name: str, phone: str | None = None, **kwargs) -> ScamReport:
    return ScamReport(name=name, phone=phone, **kwargs)


def test_add_and_get_roundtrip(manager):
    created = manager.add(
        _report(
            "Fake courier",
            "+84972009161",
            bank_account="123456",
            content="Asked for a deposit",
            line_type="mobile",
            carrier="Viettel",
            risk_level=RiskLevel.MEDIUM,
        )
    )
    assert created.id is not None
    loaded = manager.get(created.id)
    assert loaded.name == "Fake courier"
    assert loaded.status is ReportStatus.PENDING
    assert loaded.risk_level is RiskLevel.MEDIUM
    assert loaded.bank_account == "123456"
    assert isinstance(loaded.created_at, datetime)


def test_get_missing_raises(manager):
    with pytest.raises(ReportNotFoundError):
        manager.get(42)


def test_pending_reports_are_not_found_by_phone(manager):
    manager.add(_report("Pending", "+84972009161"))
    assert manager.find_approved_by_phone("+84972009161") is None


def test_approve_makes_report_searchable(manager):
    created = manager.add(_report("Loan shark", "+84972009161"))
    manager.approve(created.id)
    found = manager.find_approved_by_phone("0972009161", "+84972009161")
    assert found is not None and found.id == created.id
    assert found.status is ReportStatus.APPROVED


def test_find_by_phone_ignores_empty_candidates(manager):
    assert manager.find_approved_by_phone("", "") is None


def test_update_and_find_by_name(manager):
    created = manager.add(_report("Phishing SMS"))
    created.content = "Updated"
    created.phone = "84972009161"
    manager.update(created)
    found = manager.find_by_name("Phishing SMS")
    assert found.content == "Updated"
    assert found.phone == "84972009161"


def test_update_missing_raises(manager):
    with pytest.raises(ReportNotFoundError):
        manager.update(_report("Ghost", id=99))


def test_delete(manager):
    created = manager.add(_report("To delete"))
    deleted = manager.delete(created.id)
    assert deleted.name == "To delete"
    with pytest.raises(ReportNotFoundError):
        manager.delete(created.id)


def test_list_paginates_newest_first(manager):
    now = datetime.now()
    for i in range(5):
        manager.add(
            _report(
                f"Scam {i}",
                status=ReportStatus.APPROVED,
                created_at=now + timedelta(minutes=i),
            )
        )
    manager.add(_report("Pending one"))

    first = manager.list(status=ReportStatus.APPROVED, offset=0, limit=2)
    assert [r.name for r in first] == ["Scam 4", "Scam 3"]
    last = manager.list(status=ReportStatus.APPROVED, offset=4, limit=2)
    assert [r.name for r in last] == ["Scam 0"]
    assert manager.count(ReportStatus.APPROVED) == 5
    assert manager.count() == 6
    assert len(manager.list()) == 6
