import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from .domain.models import (
    UNKNOWN,
    ReportStatus,
    RiskLevel,
    RiskVerdict,
    ScamReport,
)
from .domain.phone import digits_only, lookup_keys
from .exceptions import InvalidPhoneError
from .infrastructure.gemini import GeminiOracle
from .repository import ReportManager
from .risk import RiskAggregator, apply_oracle

logger = logging.getLogger(__name__)

T = TypeVar("T")

RISK_WARNING = "Warning: this number may be linked to scams. Be careful and report it if in doubt."
SUSPICIOUS_WARNING = "This number has been flagged as a scam risk."
VOIP_WARNING = "VoIP numbers carry a high scam risk."
NO_PHONE_VALUES = {"", "không có", "none", "n/a"}


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0


def paginate(items: List[T], page: int, page_size: int) -> Page[T]:
    page = max(page, 1)
    start = (page - 1) * page_size
    return Page(
        items=items[start:start + page_size],
        page=page,
        page_size=page_size,
        total=len(items),
    )


@dataclass
class SearchResult:
    query: str
    canonical: str = ""
    verdict: Optional[RiskVerdict] = None
    from_database: bool = False
    warning: Optional[str] = None
    results: Page[ScamReport] = field(
        default_factory=lambda: Page(items=[], page=1, page_size=1, total=0)
    )


def verdict_from_report(report: ScamReport) -> RiskVerdict:
    """Rebuild a verdict for a number already in the curated list."""
    line_type = report.line_type or UNKNOWN
    lowered = line_type.lower()
    return RiskVerdict(
        is_valid=True,
        line_type=line_type,
        carrier=report.carrier or UNKNOWN,
        is_virtual_line="voip" in lowered or "virtual" in lowered,
        risk_level=report.risk_level or RiskLevel.LOW,
    )


class SearchService:
    """Look a phone number up in the curated list, falling back to the providers."""

    # one curated record per number
    PAGE_SIZE = 1

    def __init__(
        self,
        reports: ReportManager,
        aggregator: RiskAggregator,
        oracle: Optional[GeminiOracle] = None,
    ) -> None:
        self.reports = reports
        self.aggregator = aggregator
        self.oracle = oracle

    async def search(self, query: Optional[str], page: int = 1) -> SearchResult:
        raw = (query or "").strip()
        if not raw:
            return SearchResult(query="")

        canonical = self.aggregator.normalize(raw)
        logger.debug("Raw query: %s, normalized: %s", raw, canonical)

        report = self.reports.find_approved_by_phone(
            *lookup_keys(raw, canonical, self.aggregator.config.country_code)
        )
        if report is not None:
            verdict = verdict_from_report(report)
            return SearchResult(
                query=raw,
                canonical=canonical,
                verdict=verdict,
                from_database=True,
                warning=RISK_WARNING if verdict.needs_warning else None,
                results=paginate([report], page, self.PAGE_SIZE),
            )

        verdict = await self.aggregator.assess_async(canonical)
        if self.oracle is not None:
            signal = await asyncio.to_thread(self.oracle.is_scam, canonical)
            verdict = apply_oracle(verdict, signal)

        found: List[ScamReport] = []
        if verdict.is_valid:
            report = self.reports.add(
                ScamReport(
                    name=f"Phone check {raw}",
                    phone=canonical,
                    content=(
                        f"Provider data: {verdict.line_type}, {verdict.carrier}, "
                        f"risk: {verdict.risk_level.value}"
                    ),
                    status=ReportStatus.APPROVED,
                    line_type=verdict.line_type,
                    carrier=verdict.carrier,
                    risk_level=verdict.risk_level,
                )
            )
            logger.info("Stored provider verdict for %s as report %s", canonical, report.id)
            found.append(report)

        return SearchResult(
            query=raw,
            canonical=canonical,
            verdict=verdict,
            warning=RISK_WARNING if verdict.needs_warning else None,
            results=paginate(found, page, self.PAGE_SIZE),
        )


class ReportService:
    """Submission and moderation of scam reports."""

    def __init__(
        self,
        reports: ReportManager,
        aggregator: RiskAggregator,
        oracle: Optional[GeminiOracle] = None,
        page_size: int = 10,
    ) -> None:
        self.reports = reports
        self.aggregator = aggregator
        self.oracle = oracle
        self.page_size = page_size

    async def submit(
        self,
        name: str,
        phone: Optional[str] = None,
        bank_account: Optional[str] = None,
        content: str = "",
    ) -> tuple[ScamReport, Optional[str]]:
        """Store a pending report. Raises ``InvalidPhoneError`` for rejected numbers."""
        report = ScamReport(
            name=name,
            bank_account=bank_account or None,
            content=content,
            status=ReportStatus.PENDING,
        )
        warning = None
        if phone:
            canonical = self.aggregator.normalize(phone)
            verdict = await self.aggregator.assess_async(canonical)
            if not verdict.is_valid:
                logger.info("Rejected report with invalid phone %s", canonical)
                raise InvalidPhoneError(f"Phone number {phone} is not valid")
            if verdict.is_suspicious:
                warning = SUSPICIOUS_WARNING
            elif verdict.line_type.lower() == "voip":
                warning = VOIP_WARNING
            report.phone = canonical
            report.line_type = verdict.line_type
            report.carrier = verdict.carrier
            report.risk_level = verdict.risk_level

        report = self.reports.add(report)
        logger.info("Report %s submitted and awaiting moderation", report.id)
        return report, warning

    def get(self, report_id: int) -> ScamReport:
        return self.reports.get(report_id)

    def approve(self, report_id: int) -> ScamReport:
        report = self.reports.approve(report_id)
        logger.info("Report %s approved", report_id)
        return report

    def delete(self, report_id: int) -> ScamReport:
        report = self.reports.delete(report_id)
        logger.info("Report %s (%s) deleted", report_id, report.name)
        return report

    def list_approved(self, page: int = 1) -> Page[ScamReport]:
        page = max(page, 1)
        items = self.reports.list(
            status=ReportStatus.APPROVED,
            offset=(page - 1) * self.page_size,
            limit=self.page_size,
        )
        return Page(
            items=items,
            page=page,
            page_size=self.page_size,
            total=self.reports.count(ReportStatus.APPROVED),
        )

    def list_all(self) -> List[ScamReport]:
        return self.reports.list()

    def import_from_oracle(self, count: int = 3) -> int:
        """Upsert press-reported scams as approved reports, keyed by name.

        Raises ``ProviderError`` when the oracle payload is unusable.
        """
        if self.oracle is None:
            return 0
        imported = 0
        for item in self.oracle.fetch_scams(count):
            name = (item.get("name") or "").strip()
            if not name:
                continue
            raw_phone = (item.get("phone_number") or "").strip()
            phone = None
            if raw_phone.lower() not in NO_PHONE_VALUES and digits_only(raw_phone):
                phone = self.aggregator.normalize(digits_only(raw_phone))
            existing = self.reports.find_by_name(name)
            if existing is not None:
                existing.bank_account = item.get("bank_account")
                existing.phone = phone or None
                existing.content = item.get("description") or ""
                existing.status = ReportStatus.APPROVED
                self.reports.update(existing)
            else:
                self.reports.add(
                    ScamReport(
                        name=name,
                        bank_account=item.get("bank_account"),
                        phone=phone or None,
                        content=item.get("description") or "",
                        status=ReportStatus.APPROVED,
                    )
                )
            imported += 1
        logger.info("Imported %d scam reports from the oracle", imported)
        return imported
