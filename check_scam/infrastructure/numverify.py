import logging

import requests

from ..domain.models import UNKNOWN, ProviderOutcome, ValidatorAResult
from ..domain.validator import PhoneValidator

logger = logging.getLogger(__name__)


class NumverifyValidator(PhoneValidator[ValidatorAResult]):
    """Existence and line type lookup via apilayer's numverify."""

    name = "numverify"

    def validate(self, phone: str) -> ProviderOutcome[ValidatorAResult]:
        params = {
            "access_key": self.config.numverify_api_key,
            # numverify wants the international number without the plus
            "number": phone.lstrip("+"),
            "format": 1,
        }
        logger.debug("Numverify lookup for %s", phone)
        try:
            resp = requests.get(
                self.config.numverify_url, params=params, timeout=self.config.timeout
            )
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Numverify request failed for %s: %s", phone, exc)
            return ProviderOutcome.failed(str(exc))

        if not isinstance(data, dict):
            logger.warning("Numverify returned unexpected payload for %s", phone)
            return ProviderOutcome.failed("unexpected payload")

        error = data.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            info = error.get("info") if isinstance(error, dict) else error
            logger.warning("Numverify error for %s: %s - %s", phone, code, info)
            return ProviderOutcome.failed(f"{code}: {info}")

        return ProviderOutcome.ok(
            ValidatorAResult(
                valid=data.get("valid") is True,
                line_type=data.get("line_type") or UNKNOWN,
                carrier=data.get("carrier") or UNKNOWN,
            )
        )
