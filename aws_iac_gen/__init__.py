"""Generate CloudFormation templates from existing AWS resources."""

from __future__ import annotations

__version__ = "0.2.2"

from .errors import (
    IacGenError,
    OperationFailedError,
    PreconditionError,
    ResourceLimitExceededError,
    TemplateCreationError,
    UsageError,
)
from .filtering import FilterResult, filter_stack_managed
from .gateway import CloudFormationGateway
from .models import ScanHandle, ScannedResource, TemplateHandle
from .pagination import collect_pages
from .polling import PollResult, wait_until_terminal
from .workflows import WorkflowResult, run_resources_workflow, run_template_workflow

__all__ = [
    "CloudFormationGateway",
    "FilterResult",
    "IacGenError",
    "OperationFailedError",
    "PollResult",
    "PreconditionError",
    "ResourceLimitExceededError",
    "ScanHandle",
    "ScannedResource",
    "TemplateCreationError",
    "TemplateHandle",
    "UsageError",
    "WorkflowResult",
    "collect_pages",
    "filter_stack_managed",
    "run_resources_workflow",
    "run_template_workflow",
    "wait_until_terminal",
]
