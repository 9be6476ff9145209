from .domain.models import RiskLevel, RiskVerdict, ScamReport, ReportStatus
from .domain.phone import normalize_phone_number
from .risk import RiskAggregator, apply_oracle, merge_outcomes
from .repository import ReportManager, ReportRepository, SQLiteReportRepository
from .logging_config import configure_logging
from .config import ProviderConfig, settings

__all__ = [
    "RiskLevel",
    "RiskVerdict",
    "ScamReport",
    "ReportStatus",
    "normalize_phone_number",
    "RiskAggregator",
    "apply_oracle",
    "merge_outcomes",
    "ReportManager",
    "ReportRepository",
    "SQLiteReportRepository",
    "configure_logging",
    "ProviderConfig",
    "settings",
]
