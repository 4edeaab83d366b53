"""Exceptions raised by the IaC generator workflows."""
from __future__ import annotations


class IacGenError(Exception):
    """Base class for fatal errors reported by the CLI."""

    exit_code = 1


class UsageError(IacGenError):
    """Conflicting or missing command line options."""


class PreconditionError(IacGenError):
    """Input that cannot be used, detected before the remote work it guards."""


class OperationFailedError(IacGenError):
    """A polled long-running operation ended in a failure status."""

    def __init__(self, kind: str, operation_id: str, status: str) -> None:
        self.kind = kind
        self.operation_id = operation_id
        self.status = status
        super().__init__(f"{kind} {operation_id} ended with status {status}")


class TemplateCreationError(IacGenError):
    """CloudFormation rejected a generated template request."""


class ResourceLimitExceededError(TemplateCreationError):
    """The generated template request referenced too many resources."""


__all__ = [
    "IacGenError",
    "OperationFailedError",
    "PreconditionError",
    "ResourceLimitExceededError",
    "TemplateCreationError",
    "UsageError",
]
