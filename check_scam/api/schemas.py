from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from check_scam.domain.models import ReportStatus, RiskLevel, RiskVerdict, ScamReport
from check_scam.services import Page, SearchResult
from check_scam.validators import validate_phone_number


class VerdictOut(BaseModel):
    is_valid: bool
    line_type: str
    carrier: str
    is_suspicious: bool
    is_virtual_line: bool
    risk_level: RiskLevel

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_verdict(cls, verdict: RiskVerdict) -> "VerdictOut":
        return cls(
            is_valid=verdict.is_valid,
            line_type=verdict.line_type,
            carrier=verdict.carrier,
            is_suspicious=verdict.is_suspicious,
            is_virtual_line=verdict.is_virtual_line,
            risk_level=verdict.risk_level,
        )


class ReportOut(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    bank_account: Optional[str] = None
    content: str = ""
    status: ReportStatus
    line_type: Optional[str] = None
    carrier: Optional[str] = None
    risk_level: Optional[RiskLevel] = None
    created_at: datetime

    model_config = ConfigDict(use_enum_values=True)

    @classmethod
    def from_report(cls, report: ScamReport) -> "ReportOut":
        return cls(
            id=report.id,
            name=report.name,
            phone=report.phone,
            bank_account=report.bank_account,
            content=report.content,
            status=report.status,
            line_type=report.line_type,
            carrier=report.carrier,
            risk_level=report.risk_level,
            created_at=report.created_at,
        )


class ReportPage(BaseModel):
    items: List[ReportOut]
    page: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[ScamReport]) -> "ReportPage":
        return cls(
            items=[ReportOut.from_report(r) for r in page.items],
            page=page.page,
            total=page.total,
            total_pages=page.total_pages,
        )


class SearchResponse(BaseModel):
    query: str
    canonical: str = ""
    has_api_data: bool = False
    from_database: bool = False
    verdict: Optional[VerdictOut] = None
    warning: Optional[str] = None
    results: ReportPage

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResponse":
        return cls(
            query=result.query,
            canonical=result.canonical,
            has_api_data=result.verdict is not None,
            from_database=result.from_database,
            verdict=VerdictOut.from_verdict(result.verdict) if result.verdict else None,
            warning=result.warning,
            results=ReportPage.from_page(result.results),
        )


class ReportCreate(BaseModel):
    name: str
    phone: Optional[str] = None
    bank_account: Optional[str] = None
    content: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_phone_number(v)


class ReportCreated(BaseModel):
    id: int
    status: ReportStatus
    warning: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


class ImportResponse(BaseModel):
    imported: int
