from typing import Any, Dict, Optional

import httpx


class CopyReviewClient:
    """Thin helper for talking to the copy review API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        # Combined runs make two sequential model calls of up to 60s each.
        timeout = httpx.Timeout(150.0, connect=10.0)
        self._client = httpx.Client(base_url=self._base_url, timeout=timeout, transport=transport)

    def health(self) -> dict:
        resp = self._client.get("/api/health")
        resp.raise_for_status()
        return resp.json()

    def review_copy(self, subject_line: str, copy: str, model: Optional[str] = None) -> dict:
        resp = self._client.post("/api/review-copy", json=self._payload(subject_line, copy, model))
        resp.raise_for_status()
        return resp.json()

    def improve(
        self,
        subject_line: str,
        copy: str,
        review: Dict[str, Any],
        model: Optional[str] = None,
    ) -> dict:
        payload = self._payload(subject_line, copy, model)
        payload["review"] = review
        resp = self._client.post("/api/improve", json=payload)
        resp.raise_for_status()
        return resp.json()

    def analyze_and_improve(self, subject_line: str, copy: str, model: Optional[str] = None) -> dict:
        resp = self._client.post("/api/analyze-and-improve", json=self._payload(subject_line, copy, model))
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _payload(subject_line: str, copy: str, model: Optional[str]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"subjectLine": subject_line, "copy": copy}
        if model:
            payload["model"] = model
        return payload


__all__ = ["CopyReviewClient"]
