import json
import logging
from typing import Any, Dict, List

import requests

from ..config import ProviderConfig
from ..exceptions import ProviderError

logger = logging.getLogger(__name__)

NEWS_SOURCES = (
    "https://vnexpress.net",
    "https://tuoitre.vn",
    "https://thanhnien.vn",
    "https://dantri.com.vn",
    "https://vietnamnet.vn",
    "https://zingnews.vn",
    "https://nhandan.vn",
    "https://laodong.vn",
    "https://kenh14.vn",
    "https://plo.vn",
)

SCAM_FIELDS = ("name", "bank_account", "phone_number", "description")


def _phone_prompt(phone: str) -> str:
    return (
        f"Kiểm tra xem số điện thoại {phone} có phải là lừa đảo dựa trên dữ liệu "
        f"từ các trang báo như {', '.join(NEWS_SOURCES)}. "
        "Chỉ trả về true nếu có bằng chứng, false nếu không."
    )


def _scam_list_prompt(count: int) -> str:
    return (
        f"Hãy trả về JSON với danh sách {count} vụ lừa đảo phổ biến. "
        "Dữ liệu phải là JSON hợp lệ với format: "
        '[{"name": "Tên lừa đảo", "bank_account": "Số tài khoản", '
        '"phone_number": "Số điện thoại", "description": "Chi tiết vụ lừa đảo"}]. '
        "Chỉ trả về JSON, không kèm theo văn bản giải thích khác. "
        "Chỉ lấy các bài có số điện thoại hoặc số tài khoản ngân hàng, "
        f"lấy từ các trang báo như {', '.join(NEWS_SOURCES)}."
    )


class GeminiOracle:
    """Free-text scam oracle backed by a generative endpoint."""

    name = "gemini"

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    def _post(self, prompt: str) -> requests.Response:
        return requests.post(
            self.config.gemini_url,
            json={"prompt": prompt},
            timeout=self.config.timeout,
        )

    def is_scam(self, phone: str) -> bool:
        """Ask the oracle about ``phone``. Anything but ``"true"`` counts as no."""
        try:
            resp = self._post(_phone_prompt(phone))
        except requests.RequestException as exc:
            logger.warning("Gemini request failed for %s: %s", phone, exc)
            return False
        if resp.status_code != 200:
            logger.warning("Gemini returned HTTP %s for %s", resp.status_code, phone)
            return False
        try:
            data = resp.json()
        except ValueError:
            logger.warning("Gemini returned malformed JSON for %s", phone)
            return False
        if not isinstance(data, dict):
            return False
        result = data.get("result")
        verdict = isinstance(result, str) and result.lower() == "true"
        logger.info("Gemini verdict for %s: %s", phone, verdict)
        return verdict

    def fetch_scams(self, count: int = 3) -> List[Dict[str, Any]]:
        """Return recent scam cases reported in the press.

        Raises ``ProviderError`` when the endpoint is unreachable or the
        payload is not a list of objects.
        """
        try:
            resp = self._post(_scam_list_prompt(count))
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise ProviderError(self.name, str(exc)) from exc

        # the endpoint sometimes wraps the list as a JSON string in "result"
        if isinstance(data, dict) and "result" in data:
            data = data["result"]
            if isinstance(data, str):
                try:
                    data = json.loads(data)
                except ValueError as exc:
                    raise ProviderError(self.name, "result is not JSON") from exc

        if not isinstance(data, list) or not all(isinstance(i, dict) for i in data):
            raise ProviderError(self.name, "expected a list of scam objects")
        return [{key: item.get(key) for key in SCAM_FIELDS} for item in data]
