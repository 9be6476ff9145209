import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine

from .domain.models import ReportStatus, RiskLevel, ScamReport
from .exceptions import ReportNotFoundError

COLUMNS = (
    "id",
    "name",
    "bank_account",
    "phone",
    "content",
    "status",
    "line_type",
    "carrier",
    "risk_level",
    "created_at",
)


class ReportRepository(Protocol):
    """Interface for scam report storage backends."""

    def add(self, report: ScamReport) -> ScamReport:
        """Store a new report and return it with its identifier set."""

    def get(self, report_id: int) -> Optional[ScamReport]:
        """Return a report or ``None`` if not found."""

    def update(self, report: ScamReport) -> None:
        """Persist changes of an existing report."""

    def delete(self, report_id: int) -> bool:
        """Delete a report. Return ``False`` if it did not exist."""

    def find_approved_by_phone(self, phones: Sequence[str]) -> Optional[ScamReport]:
        """Return the first approved report whose phone matches any of ``phones``."""

    def find_by_name(self, name: str) -> Optional[ScamReport]:
        """Return a report with exactly this scammer name."""

    def list(
        self,
        status: Optional[ReportStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ScamReport]:
        """Return reports, newest first."""

    def count(self, status: Optional[ReportStatus] = None) -> int:
        """Return the number of reports."""


def _row_to_report(row: Sequence[Any]) -> ScamReport:
    data = dict(zip(COLUMNS, row))
    created_at = data["created_at"]
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)
    risk = data["risk_level"]
    return ScamReport(
        id=data["id"],
        name=data["name"],
        bank_account=data["bank_account"],
        phone=data["phone"],
        content=data["content"] or "",
        status=ReportStatus(data["status"]),
        line_type=data["line_type"],
        carrier=data["carrier"],
        risk_level=RiskLevel(risk) if risk else None,
        created_at=created_at,
    )


def _report_values(report: ScamReport) -> Dict[str, Any]:
    return {
        "name": report.name,
        "bank_account": report.bank_account,
        "phone": report.phone,
        "content": report.content,
        "status": report.status.value,
        "line_type": report.line_type,
        "carrier": report.carrier,
        "risk_level": report.risk_level.value if report.risk_level else None,
        "created_at": report.created_at,
    }


class BaseReportRepository(ABC):
    """Abstract base class for DB-backed report repositories."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @abstractmethod
    def _insert(self, values: Dict[str, Any]) -> int:
        """Insert a row and return its primary key."""

    @abstractmethod
    def _update(self, report_id: int, values: Dict[str, Any]) -> None:
        """Update fields of a row."""

    @abstractmethod
    def _delete(self, report_id: int) -> int:
        """Delete a row and return the number of rows removed."""

    @abstractmethod
    def _select(
        self,
        *,
        report_id: Optional[int] = None,
        status: Optional[str] = None,
        phones: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[tuple]:
        """Return raw rows matching all given filters, newest first."""

    @abstractmethod
    def _count(self, status: Optional[str] = None) -> int:
        """Count rows, optionally filtered by status."""

    def add(self, report: ScamReport) -> ScamReport:
        with self._lock:
            report.id = self._insert(_report_values(report))
        return report

    def get(self, report_id: int) -> Optional[ScamReport]:
        with self._lock:
            rows = self._select(report_id=report_id, limit=1)
        return _row_to_report(rows[0]) if rows else None

    def update(self, report: ScamReport) -> None:
        if report.id is None or self.get(report.id) is None:
            raise ReportNotFoundError(report.id or 0)
        with self._lock:
            self._update(report.id, _report_values(report))

    def delete(self, report_id: int) -> bool:
        with self._lock:
            return self._delete(report_id) > 0

    def find_approved_by_phone(self, phones: Sequence[str]) -> Optional[ScamReport]:
        wanted = [p for p in phones if p]
        if not wanted:
            return None
        with self._lock:
            rows = self._select(
                status=ReportStatus.APPROVED.value, phones=wanted, limit=1
            )
        return _row_to_report(rows[0]) if rows else None

    def find_by_name(self, name: str) -> Optional[ScamReport]:
        with self._lock:
            rows = self._select(name=name, limit=1)
        return _row_to_report(rows[0]) if rows else None

    def list(
        self,
        status: Optional[ReportStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ScamReport]:
        with self._lock:
            rows = self._select(
                status=status.value if status else None, offset=offset, limit=limit
            )
        return [_row_to_report(r) for r in rows]

    def count(self, status: Optional[ReportStatus] = None) -> int:
        with self._lock:
            return self._count(status.value if status else None)


class SQLiteReportRepository(BaseReportRepository):
    """Report repository backed by a SQLite database."""

    def __init__(self, db_path: str) -> None:
        super().__init__()
        self._db = sqlite3.connect(db_path, check_same_thread=False)
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS scam_reports ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT,"
            "name TEXT NOT NULL,"
            "bank_account TEXT,"
            "phone TEXT,"
            "content TEXT,"
            "status TEXT NOT NULL,"
            "line_type TEXT,"
            "carrier TEXT,"
            "risk_level TEXT,"
            "created_at TEXT"
            ")"
        )
        self._db.execute(
            "CREATE INDEX IF NOT EXISTS ix_scam_reports_phone ON scam_reports(phone)"
        )
        self._db.commit()

    @staticmethod
    def _params(values: Dict[str, Any]) -> Dict[str, Any]:
        params = dict(values)
        params["created_at"] = values["created_at"].isoformat()
        return params

    def _insert(self, values: Dict[str, Any]) -> int:
        params = self._params(values)
        cols = ", ".join(params)
        marks = ", ".join("?" for _ in params)
        cur = self._db.execute(
            f"INSERT INTO scam_reports({cols}) VALUES({marks})", tuple(params.values())
        )
        self._db.commit()
        return int(cur.lastrowid)

    def _update(self, report_id: int, values: Dict[str, Any]) -> None:
        params = self._params(values)
        fields = ", ".join(f"{k}=?" for k in params)
        self._db.execute(
            f"UPDATE scam_reports SET {fields} WHERE id=?",
            (*params.values(), report_id),
        )
        self._db.commit()

    def _delete(self, report_id: int) -> int:
        cur = self._db.execute("DELETE FROM scam_reports WHERE id=?", (report_id,))
        self._db.commit()
        return cur.rowcount

    def _select(
        self,
        *,
        report_id: Optional[int] = None,
        status: Optional[str] = None,
        phones: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[tuple]:
        clauses: List[str] = []
        values: List[Any] = []
        if report_id is not None:
            clauses.append("id=?")
            values.append(report_id)
        if status is not None:
            clauses.append("status=?")
            values.append(status)
        if phones:
            clauses.append(f"phone IN ({', '.join('?' for _ in phones)})")
            values.extend(phones)
        if name is not None:
            clauses.append("name=?")
            values.append(name)
        sql = f"SELECT {', '.join(COLUMNS)} FROM scam_reports"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        values.extend([limit if limit is not None else -1, offset])
        return self._db.execute(sql, tuple(values)).fetchall()

    def _count(self, status: Optional[str] = None) -> int:
        if status is None:
            row = self._db.execute("SELECT COUNT(*) FROM scam_reports").fetchone()
        else:
            row = self._db.execute(
                "SELECT COUNT(*) FROM scam_reports WHERE status=?", (status,)
            ).fetchone()
        return int(row[0])


class PostgresReportRepository(BaseReportRepository):
    """Report repository backed by a PostgreSQL database."""

    def __init__(self, dsn: str) -> None:
        super().__init__()
        self._engine: Engine = create_engine(dsn)
        metadata = MetaData()
        self._table = Table(
            "scam_reports",
            metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("name", String, nullable=False),
            Column("bank_account", String),
            Column("phone", String, index=True),
            Column("content", Text),
            Column("status", String, nullable=False),
            Column("line_type", String),
            Column("carrier", String),
            Column("risk_level", String),
            Column("created_at", DateTime),
        )
        metadata.create_all(self._engine)

    def _insert(self, values: Dict[str, Any]) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(insert(self._table).values(**values))
            return int(result.inserted_primary_key[0])

    def _update(self, report_id: int, values: Dict[str, Any]) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(self._table)
                .where(self._table.c.id == report_id)
                .values(**values)
            )

    def _delete(self, report_id: int) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                delete(self._table).where(self._table.c.id == report_id)
            )
            return result.rowcount

    def _select(
        self,
        *,
        report_id: Optional[int] = None,
        status: Optional[str] = None,
        phones: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[tuple]:
        c = self._table.c
        query = select(*(c[col] for col in COLUMNS))
        if report_id is not None:
            query = query.where(c.id == report_id)
        if status is not None:
            query = query.where(c.status == status)
        if phones:
            query = query.where(c.phone.in_(list(phones)))
        if name is not None:
            query = query.where(c.name == name)
        query = query.order_by(c.created_at.desc(), c.id.desc()).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        with self._engine.begin() as conn:
            return [tuple(row) for row in conn.execute(query)]

    def _count(self, status: Optional[str] = None) -> int:
        query = select(func.count()).select_from(self._table)
        if status is not None:
            query = query.where(self._table.c.status == status)
        with self._engine.begin() as conn:
            return int(conn.execute(query).scalar_one())


class ReportManager:
    """Thin wrapper delegating operations to a repository."""

    def __init__(self, repo: ReportRepository) -> None:
        self._repo = repo

    def add(self, report: ScamReport) -> ScamReport:
        return self._repo.add(report)

    def get(self, report_id: int) -> ScamReport:
        report = self._repo.get(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    def update(self, report: ScamReport) -> None:
        self._repo.update(report)

    def approve(self, report_id: int) -> ScamReport:
        report = self.get(report_id)
        report.status = ReportStatus.APPROVED
        self._repo.update(report)
        return report

    def delete(self, report_id: int) -> ScamReport:
        report = self.get(report_id)
        self._repo.delete(report_id)
        return report

    def find_approved_by_phone(self, *phones: str) -> Optional[ScamReport]:
        return self._repo.find_approved_by_phone(phones)

    def find_by_name(self, name: str) -> Optional[ScamReport]:
        return self._repo.find_by_name(name)

    def list(
        self,
        status: Optional[ReportStatus] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ScamReport]:
        return self._repo.list(status=status, offset=offset, limit=limit)

    def count(self, status: Optional[ReportStatus] = None) -> int:
        return self._repo.count(status)
