"""Thin wrapper around the CloudFormation IaC generator API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

import boto3
from botocore.exceptions import OperationNotPageableError

from .errors import IacGenError
from .models import ScanHandle, ScannedResource, TemplateHandle

logger = logging.getLogger(__name__)

DELETION_POLICY = "DELETE"
UPDATE_REPLACE_POLICY = "DELETE"


def paginate_pages(
    client: Any, method_name: str, result_key: str, **kwargs: Any
) -> Iterator[List[dict]]:
    """Yield the ``result_key`` items of every page returned by ``method_name``.

    Falls back to a single call when botocore ships no paginator for the
    operation.
    """

    try:
        paginator = client.get_paginator(method_name)
    except OperationNotPageableError:
        response = getattr(client, method_name)(**kwargs)
        yield list(response.get(result_key, []))
        return

    for page in paginator.paginate(**kwargs):
        yield list(page.get(result_key, []))


class CloudFormationGateway:
    """Resource scan and generated template operations on one boto3 client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_session(cls, session: boto3.session.Session) -> "CloudFormationGateway":
        return cls(session.client("cloudformation"))

    def start_scan(self) -> str:
        response = self._client.start_resource_scan()
        scan_id = response.get("ResourceScanId")
        if not scan_id:
            raise IacGenError("StartResourceScan did not return an ID")
        logger.debug("Started resource scan %s", scan_id)
        return scan_id

    def describe_scan(self, scan_id: str) -> ScanHandle:
        response = self._client.describe_resource_scan(ResourceScanId=scan_id)
        logger.debug("Resource scan %s status %s", scan_id, response.get("Status"))
        return ScanHandle(
            scan_id=response.get("ResourceScanId", scan_id),
            status=response.get("Status", ""),
            start_time=response.get("StartTime"),
        )

    def iter_scan_pages(self) -> Iterator[List[ScanHandle]]:
        """Lazily yield every page of resource scans in the account."""

        for summaries in paginate_pages(
            self._client, "list_resource_scans", "ResourceScanSummaries"
        ):
            yield [
                ScanHandle(
                    scan_id=summary["ResourceScanId"],
                    status=summary.get("Status", ""),
                    start_time=summary.get("StartTime"),
                )
                for summary in summaries
            ]

    def iter_scan_resource_pages(self, scan_id: str) -> Iterator[List[ScannedResource]]:
        """Lazily yield every page of resources found by ``scan_id``."""

        for resources in paginate_pages(
            self._client,
            "list_resource_scan_resources",
            "Resources",
            ResourceScanId=scan_id,
        ):
            yield [ScannedResource.from_dict(resource) for resource in resources]

    def create_template(
        self,
        name: str,
        *,
        resources: Optional[Sequence[ScannedResource]] = None,
        stack_name: Optional[str] = None,
    ) -> str:
        params: Dict[str, Any] = {
            "GeneratedTemplateName": name,
            "TemplateConfiguration": {
                "DeletionPolicy": DELETION_POLICY,
                "UpdateReplacePolicy": UPDATE_REPLACE_POLICY,
            },
        }
        if stack_name:
            params["StackName"] = stack_name
        if resources is not None:
            params["Resources"] = [resource.to_definition() for resource in resources]

        response = self._client.create_generated_template(**params)
        template_id = response.get("GeneratedTemplateId")
        if not template_id:
            raise IacGenError("CreateGeneratedTemplate did not return an ID")
        logger.debug("Created generated template %s (%s)", name, template_id)
        return template_id

    def describe_template(self, template_id: str) -> TemplateHandle:
        response = self._client.describe_generated_template(
            GeneratedTemplateName=template_id
        )
        logger.debug("Generated template %s status %s", template_id, response.get("Status"))
        return TemplateHandle(template_id=template_id, status=response.get("Status", ""))

    def fetch_template_body(
        self, template_id: str, template_format: Optional[str] = None
    ) -> str:
        params: Dict[str, Any] = {"GeneratedTemplateName": template_id}
        if template_format:
            params["Format"] = template_format
        response = self._client.get_generated_template(**params)
        return response.get("TemplateBody") or ""


__all__ = [
    "CloudFormationGateway",
    "DELETION_POLICY",
    "UPDATE_REPLACE_POLICY",
    "paginate_pages",
]
