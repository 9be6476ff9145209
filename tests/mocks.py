"""
Stand-ins for the remote providers used across the test-suite.
"""

from typing import Any, Dict, List, Optional

from check_scam.config import ProviderConfig
from check_scam.domain.models import (
    ProviderOutcome,
    ValidatorAResult,
    ValidatorBResult,
)
from check_scam.domain.validator import PhoneValidator
from check_scam.repository import ReportManager, SQLiteReportRepository
from check_scam.risk import RiskAggregator

KEYED_CONFIG = ProviderConfig(numverify_api_key="nv-key", veriphone_api_key="vp-key")


class StubValidator(PhoneValidator):
    """Validator returning a canned outcome, or raising a canned exception."""

    def __init__(self, outcome: Any, name: str = "stub") -> None:
        super().__init__(KEYED_CONFIG)
        self.outcome = outcome
        self.name = name
        self.calls: List[str] = []

    def validate(self, phone: str) -> ProviderOutcome:
        self.calls.append(phone)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class StubOracle:
    """Oracle with a fixed answer and an optional scam list."""

    def __init__(self, answer: bool = False, scams: Optional[List[Dict[str, Any]]] = None) -> None:
        self.answer = answer
        self.scams = scams or []
        self.asked: List[str] = []

    def is_scam(self, phone: str) -> bool:
        self.asked.append(phone)
        return self.answer

    def fetch_scams(self, count: int = 3) -> List[Dict[str, Any]]:
        return self.scams


class FakeResponse:
    """Minimal ``requests.Response`` replacement."""

    def __init__(self, payload: Any = None, status_code: int = 200, raise_json: bool = False) -> None:
        self._payload = payload
        self.status_code = status_code
        self._raise_json = raise_json

    def json(self) -> Any:
        if self._raise_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def numverify_ok(valid: bool = True, line_type: str = "mobile", carrier: str = "Viettel") -> ProviderOutcome:
    return ProviderOutcome.ok(ValidatorAResult(valid=valid, line_type=line_type, carrier=carrier))


def veriphone_ok(
    valid: bool = True,
    line_type: str = "Unknown",
    carrier: str = "Unknown",
    risk_level: Optional[str] = None,
) -> ProviderOutcome:
    return ProviderOutcome.ok(
        ValidatorBResult(valid=valid, line_type=line_type, carrier=carrier, risk_level=risk_level)
    )


def make_aggregator(a: Any, b: Any, config: ProviderConfig = KEYED_CONFIG) -> RiskAggregator:
    return RiskAggregator(
        config,
        numverify=StubValidator(a, "numverify"),
        veriphone=StubValidator(b, "veriphone"),
    )


def memory_manager() -> ReportManager:
    return ReportManager(SQLiteReportRepository(":memory:"))
