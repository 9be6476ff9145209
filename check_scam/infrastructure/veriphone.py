import logging

import requests

from ..domain.models import UNKNOWN, ProviderOutcome, ValidatorBResult
from ..domain.validator import PhoneValidator

logger = logging.getLogger(__name__)


class VeriphoneValidator(PhoneValidator[ValidatorBResult]):
    """Risk signal lookup via veriphone.io."""

    name = "veriphone"

    def validate(self, phone: str) -> ProviderOutcome[ValidatorBResult]:
        params = {"key": self.config.veriphone_api_key, "phone": phone}
        logger.debug("Veriphone lookup for %s", phone)
        try:
            resp = requests.get(
                self.config.veriphone_url, params=params, timeout=self.config.timeout
            )
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Veriphone request failed for %s: %s", phone, exc)
            return ProviderOutcome.failed(str(exc))

        if not isinstance(data, dict):
            logger.warning("Veriphone returned unexpected payload for %s", phone)
            return ProviderOutcome.failed("unexpected payload")

        if data.get("status") != "success":
            error = data.get("error") or f"status {data.get('status')!r}"
            logger.warning("Veriphone error for %s: %s", phone, error)
            return ProviderOutcome.failed(str(error))

        risk = data.get("risk_level")
        return ProviderOutcome.ok(
            ValidatorBResult(
                valid=data.get("is_valid") is True,
                line_type=data.get("phone_type") or UNKNOWN,
                carrier=data.get("carrier") or UNKNOWN,
                risk_level=risk if isinstance(risk, str) else None,
            )
        )
