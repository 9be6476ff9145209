from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from check_scam.dependencies import get_report_service, get_search_service
from check_scam.exceptions import InvalidPhoneError
from check_scam.services import ReportService, SearchService

from .auth import get_token, login
from .schemas import (
    ImportResponse,
    ReportCreate,
    ReportCreated,
    ReportOut,
    ReportPage,
    SearchResponse,
)

router = APIRouter()

router.post("/login")(login)


@router.get("/search", response_model=SearchResponse)
async def search(
    q: Optional[str] = None,
    page: int = Query(1, ge=1),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    result = await service.search(q, page)
    return SearchResponse.from_result(result)


@router.get("/reports", response_model=ReportPage)
def list_reports(
    page: int = Query(1, ge=1),
    service: ReportService = Depends(get_report_service),
) -> ReportPage:
    return ReportPage.from_page(service.list_approved(page))


@router.get("/reports/{report_id}", response_model=ReportOut)
def get_report(
    report_id: int, service: ReportService = Depends(get_report_service)
) -> ReportOut:
    return ReportOut.from_report(service.get(report_id))


@router.post("/reports", response_model=ReportCreated, status_code=201)
async def submit_report(
    request: ReportCreate, service: ReportService = Depends(get_report_service)
) -> ReportCreated:
    try:
        report, warning = await service.submit(
            name=request.name,
            phone=request.phone,
            bank_account=request.bank_account,
            content=request.content,
        )
    except InvalidPhoneError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return ReportCreated(id=report.id, status=report.status, warning=warning)


@router.get("/api/scamposts", response_model=List[ReportOut])
def list_all_reports(
    service: ReportService = Depends(get_report_service),
    _: str = Depends(get_token),
) -> List[ReportOut]:
    return [ReportOut.from_report(r) for r in service.list_all()]


@router.post("/reports/{report_id}/approve", response_model=ReportOut)
def approve_report(
    report_id: int,
    service: ReportService = Depends(get_report_service),
    _: str = Depends(get_token),
) -> ReportOut:
    return ReportOut.from_report(service.approve(report_id))


@router.delete("/reports/{report_id}")
def delete_report(
    report_id: int,
    service: ReportService = Depends(get_report_service),
    _: str = Depends(get_token),
) -> dict:
    report = service.delete(report_id)
    return {"detail": f"Deleted report: {report.name}"}


@router.post("/fetch-gemini-scams", response_model=ImportResponse)
def fetch_gemini_scams(
    service: ReportService = Depends(get_report_service),
    _: str = Depends(get_token),
) -> ImportResponse:
    return ImportResponse(imported=service.import_from_oracle())
