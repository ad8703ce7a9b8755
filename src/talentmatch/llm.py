"""HTTP client for optional language-model skill augmentation."""

from __future__ import annotations

import json
from typing import Any
from urllib import error, request

import structlog


def build_augmentation_payload(text: str, *, known_skills: list[str] | None = None) -> dict[str, Any]:
    """Construct the request body expected by the external extraction API."""
    return {
        "task": "skill_extraction",
        "text": text,
        "known_skills": list(known_skills or []),
        "fields": ["name", "category", "proficiency", "confidence", "context"],
    }


class HTTPSkillAugmenter:
    """Ask an external API for extra skill mentions.

    Satisfies the extraction engine's augmenter protocol. Transport failures are
    logged and yield no skills; malformed responses raise so the engine can
    discard them.
    """

    def __init__(self, endpoint: str | None, api_key: str | None = None, *, timeout: float = 10.0):
        self._endpoint = endpoint
        self._api_key = api_key
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def extract_skills(self, text: str) -> list[dict[str, Any]]:
        if not self._endpoint:
            return []
        data = json.dumps(build_augmentation_payload(text), ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except error.URLError as exc:  # pragma: no cover - error path
            self._logger.warning("llm.request_failed", error=str(exc))
            return []

        payload = json.loads(body) if body else {}
        skills = payload.get("skills", [])
        if not isinstance(skills, list):
            raise ValueError("Augmentation response 'skills' must be a list.")
        return [item for item in skills if isinstance(item, dict) and item.get("name")]
