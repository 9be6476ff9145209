"""Phone risk aggregation over Numverify and Veriphone answers."""

import asyncio
import dataclasses
import logging
from typing import Optional

from .config import ProviderConfig
from .domain.models import (
    UNKNOWN,
    ProviderOutcome,
    RiskLevel,
    RiskVerdict,
    ValidatorAResult,
    ValidatorBResult,
)
from .domain.phone import normalize_phone_number
from .domain.validator import PhoneValidator
from .infrastructure import NumverifyValidator, VeriphoneValidator

logger = logging.getLogger(__name__)

_VIRTUAL_MARKERS = ("voip", "virtual")


def merge_outcomes(
    numverify: ProviderOutcome[ValidatorAResult],
    veriphone: ProviderOutcome[ValidatorBResult],
) -> RiskVerdict:
    """Reconcile both provider answers into a single verdict.

    Numverify is authoritative for carrier and line type; Veriphone only
    fills values Numverify left unknown. Validity is confirmed by either.
    Without any provider data the default ``Low`` verdict is returned.
    """
    if not numverify.succeeded and not veriphone.succeeded:
        return RiskVerdict()

    is_valid = False
    line_type = UNKNOWN
    carrier = UNKNOWN
    is_suspicious = False

    if numverify.succeeded:
        a = numverify.data
        is_valid = a.valid
        line_type = a.line_type
        carrier = a.carrier

    if veriphone.succeeded:
        b = veriphone.data
        if carrier == UNKNOWN:
            carrier = b.carrier
        if line_type == UNKNOWN:
            line_type = b.line_type
        is_valid = is_valid or b.valid
        is_suspicious = b.flags_risk

    lowered = line_type.lower()
    is_virtual_line = any(marker in lowered for marker in _VIRTUAL_MARKERS)

    risk = RiskLevel.LOW
    if not is_valid or carrier == UNKNOWN or lowered == "voip":
        risk = risk.escalate(RiskLevel.MEDIUM)
    if is_suspicious or is_virtual_line:
        risk = risk.escalate(RiskLevel.HIGH)

    return RiskVerdict(
        is_valid=is_valid,
        line_type=line_type,
        carrier=carrier,
        is_suspicious=is_suspicious,
        is_virtual_line=is_virtual_line,
        risk_level=risk,
    )


def apply_oracle(verdict: RiskVerdict, signal: Optional[bool]) -> RiskVerdict:
    """Force ``High`` when the oracle confirms a scam. ``is_suspicious`` is kept."""
    if signal is True:
        return dataclasses.replace(
            verdict, risk_level=verdict.risk_level.escalate(RiskLevel.HIGH)
        )
    return verdict


class RiskAggregator:
    """Query both validators and merge their answers into a ``RiskVerdict``.

    No method raises: provider failures degrade to the defaults of
    ``RiskVerdict`` and are logged.
    """

    def __init__(
        self,
        config: ProviderConfig,
        numverify: Optional[PhoneValidator[ValidatorAResult]] = None,
        veriphone: Optional[PhoneValidator[ValidatorBResult]] = None,
    ) -> None:
        self.config = config
        self.numverify = numverify or NumverifyValidator(config)
        self.veriphone = veriphone or VeriphoneValidator(config)

    def normalize(self, raw: str) -> str:
        return normalize_phone_number(raw, self.config.country_code)

    @staticmethod
    def _call(validator: PhoneValidator, phone: str) -> ProviderOutcome:
        try:
            return validator.validate(phone)
        except Exception as exc:
            logger.exception(
                "Validator %s crashed for %s",
                validator.name,
                phone,
                extra={"provider": validator.name},
            )
            return ProviderOutcome.failed(str(exc))

    def _log(self, phone: str, verdict: RiskVerdict) -> RiskVerdict:
        logger.info(
            "Verdict for %s: valid=%s line_type=%s carrier=%s suspicious=%s risk=%s",
            phone,
            verdict.is_valid,
            verdict.line_type,
            verdict.carrier,
            verdict.is_suspicious,
            verdict.risk_level.value,
        )
        return verdict

    def assess(self, phone: str) -> RiskVerdict:
        """Assess a canonical phone number, calling the providers in turn."""
        if not self.config.has_keys:
            logger.error("Provider API keys are not configured")
            return RiskVerdict()
        a = self._call(self.numverify, phone)
        b = self._call(self.veriphone, phone)
        return self._log(phone, merge_outcomes(a, b))

    async def assess_async(self, phone: str) -> RiskVerdict:
        """Same as :meth:`assess` but queries both providers concurrently."""
        if not self.config.has_keys:
            logger.error("Provider API keys are not configured")
            return RiskVerdict()
        a, b = await asyncio.gather(
            asyncio.to_thread(self._call, self.numverify, phone),
            asyncio.to_thread(self._call, self.veriphone, phone),
        )
        return self._log(phone, merge_outcomes(a, b))
