"""Removal of resources already managed by a CloudFormation stack."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .models import ScannedResource


@dataclass
class FilterResult:
    """Resources that survived filtering plus counts for reporting."""

    resources: List[ScannedResource]
    total: int
    removed: int


def filter_stack_managed(resources: Iterable[ScannedResource]) -> FilterResult:
    """Drop stack-managed resources and strip the ownership flag from the rest."""

    total = 0
    kept: List[ScannedResource] = []
    for resource in resources:
        total += 1
        if resource.managed_by_stack is True:
            continue
        kept.append(resource.stripped())
    return FilterResult(resources=kept, total=total, removed=total - len(kept))


__all__ = ["FilterResult", "filter_stack_managed"]
