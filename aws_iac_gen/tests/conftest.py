"""Shared fakes for the workflow tests."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from aws_iac_gen.interaction import Choice
from aws_iac_gen.models import ScanHandle, ScannedResource, TemplateHandle


NEW_SCAN_ID = "arn:aws:cloudformation:us-east-1:123456789012:resourceScan/new-scan-0001"
TEMPLATE_ID = "arn:aws:cloudformation:us-east-1:123456789012:generatedtemplate/tmpl-0001"


def make_resource(name: str, managed: Optional[bool] = False) -> ScannedResource:
    return ScannedResource(
        resource_type="AWS::S3::Bucket",
        resource_identifier={"BucketName": name},
        managed_by_stack=managed,
    )


class FakeGateway:
    """In-memory stand-in for :class:`CloudFormationGateway`."""

    def __init__(
        self,
        *,
        scan_statuses: Sequence[str] = (),
        scan_pages: Sequence[List[ScanHandle]] = (),
        resource_pages: Sequence[List[ScannedResource]] = (),
        template_statuses: Sequence[str] = (),
        template_body: str = "{}",
        create_error: Optional[Exception] = None,
    ) -> None:
        self.scan_statuses = list(scan_statuses)
        self.scan_pages = list(scan_pages)
        self.resource_pages = list(resource_pages)
        self.template_statuses = list(template_statuses)
        self.template_body = template_body
        self.create_error = create_error
        self.calls: List[tuple] = []

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def start_scan(self) -> str:
        self.calls.append(("start_scan",))
        return NEW_SCAN_ID

    def describe_scan(self, scan_id: str) -> ScanHandle:
        self.calls.append(("describe_scan", scan_id))
        return ScanHandle(scan_id=scan_id, status=self.scan_statuses.pop(0))

    def iter_scan_pages(self) -> Iterator[List[ScanHandle]]:
        self.calls.append(("list_scans",))
        yield from self.scan_pages

    def iter_scan_resource_pages(self, scan_id: str) -> Iterator[List[ScannedResource]]:
        self.calls.append(("list_scan_resources", scan_id))
        yield from self.resource_pages

    def create_template(self, name, *, resources=None, stack_name=None) -> str:
        self.calls.append(("create_template", name, resources, stack_name))
        if self.create_error is not None:
            raise self.create_error
        return TEMPLATE_ID

    def describe_template(self, template_id: str) -> TemplateHandle:
        self.calls.append(("describe_template", template_id))
        return TemplateHandle(template_id=template_id, status=self.template_statuses.pop(0))

    def fetch_template_body(self, template_id: str, template_format=None) -> str:
        self.calls.append(("fetch_template_body", template_id, template_format))
        return self.template_body


class FakeProgress:
    def __init__(self, message: str) -> None:
        self.messages = [message]
        self.outcome: Optional[str] = None

    def update(self, message: str) -> None:
        self.messages.append(message)

    def succeed(self, message: str) -> None:
        self.outcome = f"succeed: {message}"

    def fail(self, message: str) -> None:
        self.outcome = f"fail: {message}"


class FakeInteraction:
    """Scripted answers for prompts, recording everything shown."""

    def __init__(
        self, *, filename: Optional[str] = None, confirm: bool = True, select_index: int = 0
    ) -> None:
        self.filename = filename
        self.confirm_answer = confirm
        self.select_index = select_index
        self.confirm_messages: List[str] = []
        self.choices: List[Choice] = []
        self.spinners: List[FakeProgress] = []
        self.infos: List[str] = []
        self.warnings: List[str] = []

    def ask_path(self, message: str, default: str) -> str:
        return self.filename or default

    def confirm(self, message: str, default: bool = True) -> bool:
        self.confirm_messages.append(message)
        return self.confirm_answer

    def select(self, message, choices, headers=()):
        self.choices = list(choices)
        return self.choices[self.select_index].value

    @contextmanager
    def spinner(self, message: str) -> Iterator[FakeProgress]:
        progress = FakeProgress(message)
        self.spinners.append(progress)
        yield progress

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def interaction() -> FakeInteraction:
    return FakeInteraction()
