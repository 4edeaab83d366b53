"""Tests for command line parsing, configuration and exit codes."""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError, ProfileNotFound

from aws_iac_gen import cli
from aws_iac_gen.config import Settings, generate_template_name, resolve_region
from aws_iac_gen.errors import ResourceLimitExceededError, UsageError
from aws_iac_gen.workflows import WorkflowResult


class _FakeSession:
    instances = []

    def __init__(self, profile_name=None, region_name=None) -> None:
        self.profile_name = profile_name
        self.region_name = region_name
        _FakeSession.instances.append(self)

    def client(self, name):
        raise AssertionError("no AWS client should be used")


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    _FakeSession.instances = []
    monkeypatch.setattr(cli.boto3, "Session", _FakeSession)
    monkeypatch.setattr(cli, "configure_logging", lambda verbose: None)
    monkeypatch.setattr(cli.CloudFormationGateway, "from_session", classmethod(lambda c, s: object()))


def test_parse_args_defaults() -> None:
    args = cli.parse_args(["resources", "--new-scan"])

    assert args.command == "resources"
    assert args.output == "resources.json"
    assert args.new_scan and not args.from_scan

    args = cli.parse_args(["template", "--from-stack", "legacy", "--format", "yaml"])

    assert args.input == "resources.json"
    assert args.output == "template.json"
    assert args.from_stack == "legacy"
    assert args.template_format == "YAML"


def test_subcommand_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_region_resolution_order() -> None:
    assert resolve_region("eu-west-1", {"AWS_REGION": "us-east-1"}) == "eu-west-1"
    assert resolve_region(None, {"AWS_REGION": "us-east-1", "AWS_DEFAULT_REGION": "us-west-2"}) == "us-east-1"
    assert resolve_region(None, {"AWS_REGION": "", "AWS_DEFAULT_REGION": "us-west-2"}) == "us-west-2"
    assert resolve_region(None, {}) == "ap-northeast-1"


def test_settings_reject_non_positive_poll_interval() -> None:
    args = cli.parse_args(["--poll-interval", "0", "resources", "--new-scan"])

    with pytest.raises(UsageError):
        Settings.from_args(args, environ={})


def test_generate_template_name_uses_milliseconds() -> None:
    assert generate_template_name(12.25) == "iacgen-12250"


@pytest.mark.parametrize("flags", [[], ["--new-scan", "--from-scan"]])
def test_main_rejects_bad_scan_flags(flags, capsys) -> None:
    assert cli.main(["resources", *flags]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_passes_region_and_profile(monkeypatch) -> None:
    monkeypatch.setattr(cli, "run_template_workflow", lambda *a, **k: WorkflowResult(saved=True))

    assert cli.main(["--region", "eu-central-1", "--profile", "ops", "template"]) == 0
    session = _FakeSession.instances[-1]
    assert (session.region_name, session.profile_name) == ("eu-central-1", "ops")


def test_main_abort_exits_zero(monkeypatch) -> None:
    monkeypatch.setattr(cli, "run_resources_workflow", lambda *a, **k: WorkflowResult(saved=False))

    assert cli.main(["resources", "--new-scan"]) == 0


def test_main_reports_specialised_limit_error(monkeypatch, capsys) -> None:
    def fail(*args, **kwargs):
        raise ResourceLimitExceededError("maximum of 500 resources per template")

    monkeypatch.setattr(cli, "run_template_workflow", fail)

    assert cli.main(["template"]) == 1
    assert "maximum of 500 resources" in capsys.readouterr().err


def test_main_reports_uncaught_aws_errors(monkeypatch, capsys) -> None:
    def fail(*args, **kwargs):
        raise ClientError({"Error": {"Code": "AccessDenied", "Message": "nope"}}, "StartResourceScan")

    monkeypatch.setattr(cli, "run_resources_workflow", fail)

    assert cli.main(["resources", "--new-scan"]) == 1
    assert "AccessDenied" in capsys.readouterr().err


def test_main_reports_undecodable_resources_file(tmp_path, monkeypatch, capsys) -> None:
    (tmp_path / "resources.json").write_bytes(b'[{"ResourceType": "\xff"}]')
    monkeypatch.chdir(tmp_path)

    assert cli.main(["template"]) == 1
    assert "Error: Resources file" in capsys.readouterr().err


def test_scan_flags_are_checked_before_session(monkeypatch, capsys) -> None:
    """A bad profile never hides the scan flag usage error."""

    def missing_profile(profile_name=None, region_name=None):
        raise ProfileNotFound(profile=profile_name)

    monkeypatch.setattr(cli.boto3, "Session", missing_profile)

    assert cli.main(["--profile", "nope", "resources"]) == 1
    err = capsys.readouterr().err
    assert "--new-scan or --from-scan" in err
    assert "nope" not in err
