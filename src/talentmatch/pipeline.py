"""Batch matching pipeline: load, score, store, rank and report."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Sequence

import pendulum
import structlog
from pydantic import BaseModel

from . import __version__
from .core.comparison import ProfileComparisonResult
from .core.scoring import ScoringEngine
from .core.store import ProfileStore
from .schemas import CandidateProfile, JobRequirement, ScoringWeights, job_requirement_for_role


class ProfileLoadError(ValueError):
    """Raised when profile loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[CandidateProfile]):
        super().__init__("Profile loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Profile loading failed: {self.errors}"


class ProfileLoader:
    """Load candidate profiles from JSON lines."""

    def load(self, path: Path) -> list[CandidateProfile]:
        profiles: list[CandidateProfile] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                try:
                    profile = CandidateProfile.model_validate(record.get("profile", record))
                except Exception as exc:  # noqa: BLE001
                    errors.append(f"line {idx}: {exc}")
                    continue
                profiles.append(profile)
        if errors:
            raise ProfileLoadError(errors, profiles)
        return profiles


class JobRequirementLoader:
    """Load a job requirement document.

    Either a full requirement object, or ``{"role": ..., "level": ...}`` with
    optional ``"skills"`` resolved through the role/level helper.
    """

    def load(self, path: Path) -> JobRequirement:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid job JSON: {exc}") from exc
        if isinstance(data, dict) and "role" in data:
            job = job_requirement_for_role(data["role"], data.get("level", "mid"), data.get("skills"))
            if data.get("job_id"):
                job = job.model_copy(update={"job_id": data["job_id"]})
            return job
        return JobRequirement.model_validate(data)


class OutputWriter:
    """Persist matching reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False, default=_json_default))
            handle.write("\n")


class MatchingPipeline:
    """End-to-end orchestrator scoring a profile pool against one job."""

    def __init__(
        self,
        *,
        scorer: ScoringEngine,
        store: ProfileStore,
        profile_loader: ProfileLoader | None = None,
        job_loader: JobRequirementLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._scorer = scorer
        self._store = store
        self._profiles = profile_loader or ProfileLoader()
        self._jobs = job_loader or JobRequirementLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    @property
    def store(self) -> ProfileStore:
        return self._store

    def run(
        self,
        *,
        profiles_path: Path,
        job_path: Path,
        output_path: Path,
        weights: ScoringWeights | Mapping[str, float] | None = None,
        audit_logger: AuditLogger | None = None,
        compare_ids: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        job = self._jobs.load(job_path)
        load_errors: list[str] = []
        try:
            profiles = self._profiles.load(profiles_path)
        except ProfileLoadError as exc:
            profiles = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("profiles.partial_load", errors=exc.errors)

        entries: list[dict[str, Any]] = []
        for profile in profiles:
            result = self._scorer.score_candidate(profile, job, weights)
            self._store.store_profile(profile, result)
            entries.append(
                {
                    "profile_id": profile.id,
                    "candidate_id": profile.candidate_id,
                    "name": profile.personal_info.name,
                    "scoring": result.model_dump(mode="json"),
                }
            )

            if audit_logger:
                audit_logger.append(
                    {
                        "profile_id": profile.id,
                        "candidate_id": profile.candidate_id,
                        "job_id": job.job_id,
                        "overall_score": result.overall_score,
                        "category_scores": result.category_scores.model_dump(),
                        "confidence": result.confidence,
                        "weights": result.metadata.weights.model_dump(),
                    }
                )

            self._logger.info(
                "pipeline.result",
                profile_id=profile.id,
                candidate_id=profile.candidate_id,
                job_id=job.job_id,
                overall_score=result.overall_score,
                confidence=result.confidence,
            )

        entries.sort(key=lambda entry: entry["scoring"]["overall_score"], reverse=True)
        for rank, entry in enumerate(entries, start=1):
            entry["rank"] = rank

        payload: dict[str, Any] = {
            "metadata": {
                "job_id": job.job_id,
                "profile_count": len(profiles),
                "errors": load_errors,
                "timestamp": pendulum.now().to_iso8601_string(),
                "app_version": __version__,
            },
            "results": entries,
        }
        if compare_ids is not None:
            # an empty selection compares every loaded profile
            ids = list(compare_ids) or [profile.id for profile in profiles]
            comparison = self._store.compare_profiles(ids)
            payload["comparison"] = serialize_comparison(comparison)

        self._writer.write(output_path, payload)
        return payload


def serialize_comparison(result: ProfileComparisonResult) -> dict[str, Any]:
    """JSON-ready view of a comparison; profiles are referenced by id only."""
    payload = {
        "profile_ids": [profile.id for profile in result.profiles],
        "comparison": asdict(result.comparison),
        "recommendations": [asdict(item) for item in result.recommendations],
        "summary": asdict(result.summary),
    }
    return json.loads(json.dumps(payload, default=_json_default, ensure_ascii=False))


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
