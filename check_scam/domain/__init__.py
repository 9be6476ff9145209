from .models import (
    UNKNOWN,
    ProviderOutcome,
    ReportStatus,
    RiskLevel,
    RiskVerdict,
    ScamReport,
    ValidatorAResult,
    ValidatorBResult,
)
from .phone import digits_only, normalize_phone_number
from .validator import PhoneValidator

__all__ = [
    "UNKNOWN",
    "ProviderOutcome",
    "ReportStatus",
    "RiskLevel",
    "RiskVerdict",
    "ScamReport",
    "ValidatorAResult",
    "ValidatorBResult",
    "digits_only",
    "normalize_phone_number",
    "PhoneValidator",
]
