from fastapi import FastAPI, Request

from .config import ProviderConfig, settings
from .infrastructure import GeminiOracle
from .repository import (
    PostgresReportRepository,
    ReportManager,
    ReportRepository,
    SQLiteReportRepository,
)
from .risk import RiskAggregator
from .services import ReportService, SearchService


def init_app(app: FastAPI) -> None:
    """Create and store shared dependencies on the application."""
    repo: ReportRepository
    if settings.pg_host:
        repo = PostgresReportRepository(settings.pg_dsn)
    else:
        repo = SQLiteReportRepository(settings.db_path)
    manager = ReportManager(repo)

    provider_config = ProviderConfig.from_settings(settings)
    aggregator = RiskAggregator(provider_config)
    oracle = GeminiOracle(provider_config) if settings.gemini_enabled else None

    app.state.report_manager = manager
    app.state.search_service = SearchService(manager, aggregator, oracle)
    app.state.report_service = ReportService(
        manager, aggregator, oracle, page_size=settings.page_size
    )


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_report_service(request: Request) -> ReportService:
    return request.app.state.report_service
