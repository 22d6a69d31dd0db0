"""CLI commands for offline selection runs."""

import json
import logging
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path

import click
import structlog
import yaml
from pydantic import TypeAdapter, ValidationError

from diverse_select.config import (
    PoliciesConfig,
    PolicyValidationError,
    format_validation_error,
    load_policies,
)
from diverse_select.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from diverse_select.selection import Candidate, RankedDiverseSelector
from diverse_select.selection.seed import daily_seed, short_window_seed
from diverse_select.settings import get_settings


logger = structlog.get_logger()

_CANDIDATES_ADAPTER = TypeAdapter(list[Candidate])


@dataclass
class SelectOptions:
    """Options for the select command."""

    input_path: Path
    policy_name: str
    policies_path: Path | None
    limit: int | None
    seed: int | None
    location: str | None
    full: bool
    json_logs: bool | None
    verbose: bool


def _setup_logging(json_logs: bool | None, verbose: bool) -> None:
    """Configure logging to stderr so stdout carries only results.

    Args:
        json_logs: Log format from the command line, or None to use the
            DIVERSE_SELECT_JSON_LOGS setting.
        verbose: Force DEBUG level.
    """
    settings = get_settings()
    level = logging.DEBUG if verbose else settings.logging_level
    if json_logs is None:
        json_logs = settings.json_logs
    configure_logging(level=level, output=sys.stderr, json_format=json_logs)


def _echo_validation_errors(errors: list[dict[str, str]], header: str) -> None:
    """Print formatted validation errors to stderr."""
    click.echo(header, err=True)
    for error in errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        click.echo(f"  - {formatted}", err=True)


def _load_policies_or_exit(policies_path: Path | None) -> PoliciesConfig:
    """Load policies from a file, or fall back to defaults.

    Args:
        policies_path: Explicit path, or None to use settings/defaults.

    Returns:
        Validated policies.
    """
    path = policies_path or get_settings().policies_path
    if path is None:
        return PoliciesConfig()

    try:
        return load_policies(path)
    except PolicyValidationError as e:
        _echo_validation_errors(e.errors, f"Policy file {e.file_path} is invalid:")
        sys.exit(1)
    except (FileNotFoundError, yaml.YAMLError) as e:
        click.echo(f"Error: cannot read policy file {path}: {e}", err=True)
        sys.exit(1)


def _read_candidates_or_exit(input_path: Path) -> list[Candidate]:
    """Read and validate a JSON array of candidate records.

    Args:
        input_path: Path to the JSON file.

    Returns:
        Parsed candidates.
    """
    try:
        data = json.loads(input_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        click.echo(f"Error: {input_path} is not valid JSON: {e}", err=True)
        sys.exit(1)

    try:
        return _CANDIDATES_ADAPTER.validate_python(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(loc) for loc in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        _echo_validation_errors(errors, f"Candidate file {input_path} is invalid:")
        sys.exit(1)


def _execute_select(options: SelectOptions) -> None:
    """Run one selection and print the result as JSON."""
    request_id = str(uuid.uuid4())
    _setup_logging(options.json_logs, options.verbose)
    bind_request_context(request_id, policy=options.policy_name)
    try:
        _run_select(options, request_id)
    finally:
        clear_request_context()


def _run_select(options: SelectOptions, request_id: str) -> None:
    """Load inputs, select and print the payload."""
    log = logger.bind(component="cli", command="select")
    log.info(
        "select_started",
        input_path=str(options.input_path),
        policies_path=str(options.policies_path) if options.policies_path else None,
        limit=options.limit,
    )

    policies = _load_policies_or_exit(options.policies_path)
    policy = policies.policy(options.policy_name)
    candidates = _read_candidates_or_exit(options.input_path)

    seed = options.seed
    if seed is None:
        seed = policy.seed_for(options.location)

    request = policy.build_request(limit=options.limit, seed=seed)
    outcome = RankedDiverseSelector(request=request, run_id=request_id).select(
        candidates
    )

    payload: dict[str, object] = {
        "policy": options.policy_name,
        "seed": request.seed,
        "limit": request.limit,
        "output_checksum": outcome.output_checksum,
        "stats": outcome.stats,
    }
    if options.full:
        payload["items"] = [c.model_dump(mode="json") for c in outcome.items]
    else:
        payload["ids"] = outcome.ids

    click.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Diversity-constrained trending and featured selection."""


@cli.command()
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding an array of candidate records.",
)
@click.option(
    "--policy",
    "policy_name",
    type=click.Choice(["trending", "featured"]),
    default="trending",
    show_default=True,
    help="Which selection policy to apply.",
)
@click.option(
    "--policies",
    "policies_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to policies.yaml (default: built-in policies).",
)
@click.option(
    "--limit",
    type=int,
    default=None,
    help="Number of items to select (default: the policy's default_limit).",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Explicit tie-break seed. Overrides --location.",
)
@click.option(
    "--location",
    type=str,
    default=None,
    help="Location key mixed into the rotation seed.",
)
@click.option(
    "--full",
    is_flag=True,
    help="Print full candidate records instead of ids.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: DIVERSE_SELECT_JSON_LOGS, else true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def select(  # noqa: PLR0913
    input_path: Path,
    policy_name: str,
    policies_path: Path | None,
    limit: int | None,
    seed: int | None,
    location: str | None,
    full: bool,
    json_logs: bool | None,
    verbose: bool,
) -> None:
    """Select a diverse list from a candidate file.

    Without --seed the seed comes from the policy's rotation window, so
    repeated runs inside one window print the same list.
    """
    options = SelectOptions(
        input_path=input_path,
        policy_name=policy_name,
        policies_path=policies_path,
        limit=limit,
        seed=seed,
        location=location,
        full=full,
        json_logs=json_logs,
        verbose=verbose,
    )
    _execute_select(options)


@cli.command()
@click.option(
    "--window",
    type=click.Choice(["short", "daily"]),
    default="short",
    show_default=True,
    help="Rotation window.",
)
@click.option(
    "--minutes",
    type=click.IntRange(min=1),
    default=15,
    show_default=True,
    help="Length of the short window in minutes.",
)
@click.option(
    "--location",
    type=str,
    default=None,
    help="Location key mixed into the seed.",
)
def seed(window: str, minutes: int, location: str | None) -> None:
    """Print the seed for the current rotation window."""
    if window == "daily":
        value = daily_seed(location)
    else:
        value = short_window_seed(minutes, location)
    click.echo(str(value))


@cli.command()
@click.option(
    "--policies",
    "policies_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to policies.yaml.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: DIVERSE_SELECT_JSON_LOGS, else true).",
)
def validate(policies_path: Path, json_logs: bool | None) -> None:
    """Validate a policy file without selecting anything."""
    _setup_logging(json_logs, verbose=False)
    policies = _load_policies_or_exit(policies_path)

    click.echo("Policy file is valid!")
    for name in ("trending", "featured"):
        policy = policies.policy(name)
        click.echo(
            f"  {name}: caps {policy.max_per_coarse_group_strict}/"
            f"{policy.max_per_coarse_group_relaxed}, window {policy.window.value}"
        )


def main() -> None:
    """Console script entry point."""
    cli()
