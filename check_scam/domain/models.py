from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

UNKNOWN = "Unknown"

T = TypeVar("T")


class RiskLevel(str, Enum):
    """Ordinal scam likelihood of a phone number."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    def escalate(self, other: "RiskLevel") -> "RiskLevel":
        """Return the more severe of ``self`` and ``other``."""
        return other if other.rank > self.rank else self


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH]


class ReportStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


@dataclass(frozen=True)
class ValidatorAResult:
    """Existence and line type answer from Numverify."""

    valid: bool = False
    line_type: str = UNKNOWN
    carrier: str = UNKNOWN


@dataclass(frozen=True)
class ValidatorBResult:
    """Risk signal answer from Veriphone. ``risk_level`` is ``None`` when absent."""

    valid: bool = False
    line_type: str = UNKNOWN
    carrier: str = UNKNOWN
    risk_level: Optional[str] = None

    @property
    def flags_risk(self) -> bool:
        return (self.risk_level or "").lower() in {"high", "medium"}


@dataclass(frozen=True)
class ProviderOutcome(Generic[T]):
    """Either the parsed provider payload or the reason it is missing."""

    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "ProviderOutcome[T]":
        return cls(data=data)

    @classmethod
    def failed(cls, error: str) -> "ProviderOutcome[T]":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.data is not None


@dataclass(frozen=True)
class RiskVerdict:
    """Merged per-query assessment. Never stored as is."""

    is_valid: bool = False
    line_type: str = UNKNOWN
    carrier: str = UNKNOWN
    is_suspicious: bool = False
    is_virtual_line: bool = False
    risk_level: RiskLevel = RiskLevel.LOW

    @property
    def needs_warning(self) -> bool:
        return self.risk_level in (RiskLevel.MEDIUM, RiskLevel.HIGH)


@dataclass
class ScamReport:
    """A reported scam, either awaiting moderation or curated."""

    name: str
    phone: Optional[str] = None
    bank_account: Optional[str] = None
    content: str = ""
    status: ReportStatus = ReportStatus.PENDING
    line_type: Optional[str] = None
    carrier: Optional[str] = None
    risk_level: Optional[RiskLevel] = None
    created_at: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None
