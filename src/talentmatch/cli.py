"""Typer CLI entrypoint for extraction, scoring and comparison."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError

from .config import ConfigManager
from .container import create_container
from .core.scoring import weights_for_role
from .errors import InsufficientProfilesError
from .logging import configure_logging
from .pipeline import AuditLogger
from .schemas.config import load_config

app = typer.Typer(help="Interview transcript profiling and candidate matching CLI.")


def _load_settings(config: Optional[Path], llm_endpoint: Optional[str] = None) -> dict[str, Any]:
    settings: dict[str, Any] = {}
    if config:
        raw = ConfigManager.load_path(config) or {}
        try:
            settings = load_config(raw).to_settings()
        except ValidationError as exc:
            raise typer.BadParameter(f"Invalid config file: {exc}", param_hint="'--config'") from exc
    if llm_endpoint:
        settings.setdefault("llm", {})["endpoint"] = llm_endpoint
    return settings


@app.command()
def extract(
    transcript: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Transcript text path."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write extraction JSON here instead of stdout."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
    llm_endpoint: Optional[str] = typer.Option(None, help="Skill augmentation API endpoint."),
) -> None:
    """Extract typed skills from a transcript."""
    configure_logging(log_level)
    container = create_container(settings=_load_settings(config, llm_endpoint))
    result = container.extractor().extract_skills(transcript.read_text(encoding="utf-8"))

    rendered = json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered, encoding="utf-8")
        typer.echo(f"Extracted {len(result.skills)} skills. Results saved to {output}.")
    else:
        typer.echo(rendered)


@app.command()
def score(
    profiles: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Profiles JSONL path."),
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job requirement JSON path."),
    output: Path = typer.Option(..., dir_okay=False, resolve_path=True, help="Output JSON path."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    role_weights: Optional[str] = typer.Option(
        None, help="Weight preset: technical, leadership, communication or balanced."
    ),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Score every profile against a job and write a ranked report."""
    configure_logging(log_level)
    container = create_container(settings=_load_settings(config))
    payload = container.pipeline().run(
        profiles_path=profiles,
        job_path=job,
        output_path=output,
        weights=weights_for_role(role_weights) if role_weights else None,
        audit_logger=AuditLogger(audit_log) if audit_log else None,
    )
    typer.echo(f"Scored {len(payload['results'])} profiles. Results saved to {output}.")


@app.command()
def compare(
    profiles: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Profiles JSONL path."),
    job: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Job requirement JSON path."),
    output: Path = typer.Option(..., dir_okay=False, resolve_path=True, help="Output JSON path."),
    profile_id: Optional[List[str]] = typer.Option(
        None, "--id", help="Profile id to compare; repeat for more. Defaults to all profiles."
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Score profiles, then compare and rank the selected ones."""
    configure_logging(log_level)
    container = create_container(settings=_load_settings(config))
    try:
        payload = container.pipeline().run(
            profiles_path=profiles,
            job_path=job,
            output_path=output,
            compare_ids=list(profile_id or []),
        )
    except InsufficientProfilesError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    summary = payload["comparison"]["summary"]
    typer.echo(f"Top candidate: {summary['top_candidate']}. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
