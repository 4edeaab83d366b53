"""Resources and template workflows built on the gateway and poller."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RESOURCES_FILE,
    DEFAULT_TEMPLATE_FILE,
    TEMPLATE_RESOURCE_LIMIT,
    generate_template_name,
)
from .errors import (
    OperationFailedError,
    PreconditionError,
    ResourceLimitExceededError,
    TemplateCreationError,
    UsageError,
)
from .filtering import filter_stack_managed
from .gateway import CloudFormationGateway
from .interaction import Choice, Interaction, confirm_output_path
from .models import (
    SCAN_FAILURE_STATUSES,
    TEMPLATE_FAILURE_STATUSES,
    ScanHandle,
    ScannedResource,
)
from .pagination import collect_pages
from .polling import wait_until_terminal
from .utils import read_json_file, write_text_atomic

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]

SCAN_TABLE_HEADERS = ("Scan", "Status", "Started")


@dataclass
class WorkflowResult:
    """Outcome of a workflow that did not fail."""

    saved: bool
    path: Optional[Path] = None
    message: str = ""


# ---------------------------------------------------------------------------
# resources
# ---------------------------------------------------------------------------


def check_scan_source(new_scan: bool, from_scan: bool) -> None:
    """Raise :class:`UsageError` unless exactly one scan source is selected."""

    if not new_scan and not from_scan:
        raise UsageError("You must specify either --new-scan or --from-scan")
    if new_scan and from_scan:
        raise UsageError("You cannot specify both --new-scan and --from-scan")


def run_resources_workflow(
    gateway: CloudFormationGateway,
    interaction: Interaction,
    *,
    new_scan: bool,
    from_scan: bool,
    output: str = DEFAULT_RESOURCES_FILE,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Sleep = time.sleep,
    cwd: Optional[Path] = None,
) -> WorkflowResult:
    """Download the resources of a COMPLETE scan and save the unmanaged ones."""

    check_scan_source(new_scan, from_scan)

    if new_scan:
        scan_id = gateway.start_scan()
        _wait_for_scan(gateway, interaction, scan_id, poll_interval, sleep)
    else:
        scan = _choose_existing_scan(gateway, interaction)
        if scan is None:
            interaction.info("No scans found.")
            return WorkflowResult(saved=False, message="No scans found.")
        # Existing scans are never waited on.
        if not scan.is_complete:
            raise PreconditionError(
                f"Selected scan is in {scan.status} status. Only COMPLETE scans can be used."
            )
        scan_id = scan.scan_id

    with interaction.spinner("Downloading resources...") as progress:
        resources = collect_pages(
            gateway.iter_scan_resource_pages(scan_id),
            on_progress=lambda count: progress.update(
                f"Downloading resources... {count} found"
            ),
        )
        progress.succeed(f"Downloaded {len(resources)} resources")

    filtered = filter_stack_managed(resources)
    kept = filtered.resources
    logger.debug(
        "Scan %s: %d resources, %d stack-managed", scan_id, filtered.total, filtered.removed
    )
    if len(kept) > TEMPLATE_RESOURCE_LIMIT:
        interaction.warn(
            f"You have {len(kept)} resources, which exceeds the limit of "
            f"{TEMPLATE_RESOURCE_LIMIT} for template generation. Consider filtering "
            "resources or splitting them into multiple templates."
        )

    out_file = confirm_output_path(interaction, output, cwd)
    if out_file is None:
        return WorkflowResult(saved=False, message="Nothing was saved.")

    write_text_atomic(out_file, json.dumps([r.to_dict() for r in kept], indent=2))
    message = (
        f"✓ Saved {len(kept)} resources → {out_file} "
        f"(filtered {filtered.removed} stack-managed resources)"
    )
    interaction.info(message)
    return WorkflowResult(saved=True, path=out_file, message=message)


def _wait_for_scan(
    gateway: CloudFormationGateway,
    interaction: Interaction,
    scan_id: str,
    poll_interval: float,
    sleep: Sleep,
) -> None:
    waiting = f"Waiting for resource scan {scan_id}..."
    with interaction.spinner(waiting) as progress:
        result = wait_until_terminal(
            scan_id,
            lambda operation_id: gateway.describe_scan(operation_id).status,
            poll_interval,
            failure_statuses=SCAN_FAILURE_STATUSES,
            sleep=sleep,
            on_poll=lambda status, _attempt: progress.update(f"{waiting} ({status})"),
        )
        if not result.succeeded:
            progress.fail(f"Resource scan ended with status {result.status}")
            raise OperationFailedError("Resource scan", scan_id, result.status)
        progress.succeed("Resource scan COMPLETE.")


def _choose_existing_scan(
    gateway: CloudFormationGateway, interaction: Interaction
) -> Optional[ScanHandle]:
    with interaction.spinner("Listing resource scans...") as progress:
        scans: List[ScanHandle] = collect_pages(gateway.iter_scan_pages())
        progress.succeed(f"Found {len(scans)} scans")
    if not scans:
        return None

    choices = [Choice(columns=scan.display_row(), value=scan) for scan in scans]
    return interaction.select(
        "Which scan would you like to use?", choices, headers=SCAN_TABLE_HEADERS
    )


# ---------------------------------------------------------------------------
# template
# ---------------------------------------------------------------------------


def load_resources_file(path: Path) -> List[ScannedResource]:
    """Read a resources file and check it fits in one generated template."""

    data = read_json_file(path)
    if not isinstance(data, list):
        raise PreconditionError(f"Resources file {path} must contain a JSON array")
    if not data:
        raise PreconditionError("Resource list is empty.")
    if len(data) > TEMPLATE_RESOURCE_LIMIT:
        raise PreconditionError(
            f"The resources file contains {len(data)} resources, which exceeds the AWS "
            f"limit of {TEMPLATE_RESOURCE_LIMIT}. Please reduce the number of resources "
            "before generating a template."
        )
    if not all(isinstance(entry, dict) for entry in data):
        raise PreconditionError(f"Resources file {path} must contain only JSON objects")
    for index, entry in enumerate(data):
        if not isinstance(entry.get("ResourceIdentifier") or {}, dict):
            raise PreconditionError(
                f"Resource {index} in {path} has a ResourceIdentifier that is not a JSON object"
            )
    return [ScannedResource.from_dict(entry) for entry in data]


def run_template_workflow(
    gateway: CloudFormationGateway,
    interaction: Interaction,
    *,
    input_path: str = DEFAULT_RESOURCES_FILE,
    output: str = DEFAULT_TEMPLATE_FILE,
    from_stack: Optional[str] = None,
    template_format: Optional[str] = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    sleep: Sleep = time.sleep,
    cwd: Optional[Path] = None,
    now: Optional[float] = None,
) -> WorkflowResult:
    """Generate a template from a resources file or an existing stack and save it."""

    resources: Optional[List[ScannedResource]] = None
    if not from_stack:
        resources = load_resources_file((cwd or Path.cwd()) / input_path)

    name = generate_template_name(now)
    try:
        template_id = gateway.create_template(
            name, resources=resources, stack_name=from_stack
        )
        _wait_for_template(gateway, interaction, template_id, poll_interval, sleep)
    except (ClientError, BotoCoreError) as exc:
        raise _template_creation_error(exc) from exc

    body = gateway.fetch_template_body(template_id, template_format)

    out_file = confirm_output_path(interaction, output, cwd)
    if out_file is None:
        return WorkflowResult(saved=False, message="Nothing was saved.")

    write_text_atomic(out_file, body)
    message = f"✓ Template saved → {out_file}"
    interaction.info(message)
    return WorkflowResult(saved=True, path=out_file, message=message)


def _wait_for_template(
    gateway: CloudFormationGateway,
    interaction: Interaction,
    template_id: str,
    poll_interval: float,
    sleep: Sleep,
) -> None:
    waiting = f"Waiting for generated template {template_id}..."
    with interaction.spinner(waiting) as progress:
        result = wait_until_terminal(
            template_id,
            lambda operation_id: gateway.describe_template(operation_id).status,
            poll_interval,
            failure_statuses=TEMPLATE_FAILURE_STATUSES,
            sleep=sleep,
            on_poll=lambda status, _attempt: progress.update(f"{waiting} ({status})"),
        )
        if not result.succeeded:
            progress.fail("Template generation FAILED.")
            raise OperationFailedError("Generated template", template_id, result.status)
        progress.succeed("Template generation COMPLETE.")


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Message", "") or str(exc)
    return str(exc)


def _template_creation_error(exc: Exception) -> TemplateCreationError:
    message = _error_message(exc)
    if "Resources" in message and str(TEMPLATE_RESOURCE_LIMIT) in message:
        return ResourceLimitExceededError(
            "Failed to create template - AWS CloudFormation supports a maximum of "
            f"{TEMPLATE_RESOURCE_LIMIT} resources per template. Please reduce the "
            "number of resources and try again."
        )
    return TemplateCreationError(f"Error creating template: {message}")


__all__ = [
    "WorkflowResult",
    "check_scan_source",
    "load_resources_file",
    "run_resources_workflow",
    "run_template_workflow",
]
