import logging
from typing import Any, BinaryIO, List, Optional

import requests
from pydantic import ValidationError

from .config import get_api_base_url, get_api_timeout
from .plan import PreviewDataset, ReportConfig, ReportResult, SampleFile

logger = logging.getLogger(__name__)


class ReportServiceError(Exception):
    """Remote call failed. ``str(err)`` is the server's message, shown to the user as is."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ReportClient:
    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "ReportClient":
        return cls(get_api_base_url(), timeout=get_api_timeout())

    def _request(self, method: str, path: str, fallback: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("report service unreachable: %s %s: %s", method, url, e)
            raise ReportServiceError(f"{fallback}: {e}") from e
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            text = (resp.text or "").strip()
            logger.warning("report service error: %s %s -> %s %s", method, url, resp.status_code, text)
            raise ReportServiceError(text or f"{fallback} (HTTP {resp.status_code})", resp.status_code) from e
        try:
            return resp.json()
        except ValueError as e:
            raise ReportServiceError(f"{fallback}: malformed response", resp.status_code) from e

    def _parse(self, model, data, fallback: str):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("unexpected payload for %s: %s", model.__name__, e)
            raise ReportServiceError(f"{fallback}: unexpected response shape") from e

    def fetch_samples(self) -> List[SampleFile]:
        data = self._request("GET", "/samples", "Failed to fetch samples")
        return [self._parse(SampleFile, item, "Failed to fetch samples") for item in data or []]

    def fetch_sample_preview(self, sample_id: str) -> PreviewDataset:
        data = self._request("GET", f"/samples/{sample_id}?view", "Failed to load sample")
        return self._parse(PreviewDataset, data, "Failed to load sample")

    def upload_file(self, file_name: str, content: BinaryIO) -> PreviewDataset:
        files = {"file": (file_name, content, "text/csv")}
        data = self._request("POST", "/upload", "Upload failed", files=files)
        return self._parse(PreviewDataset, data, "Upload failed")

    def run_report(self, report_id: str, config: ReportConfig) -> ReportResult:
        data = self._request("POST", f"/reports/{report_id}/run", "Failed to run report", json=config.to_payload())
        return self._parse(ReportResult, data, "Failed to run report")
