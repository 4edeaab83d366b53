"""Command line interface for the IaC generator."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RESOURCES_FILE,
    DEFAULT_TEMPLATE_FILE,
    Settings,
)
from .errors import IacGenError
from .gateway import CloudFormationGateway
from .interaction import RichInteraction
from .workflows import (
    WorkflowResult,
    check_scan_source,
    run_resources_workflow,
    run_template_workflow,
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Return parsed command line arguments."""

    parser = argparse.ArgumentParser(
        prog="aws-iac-gen",
        description="Generate CloudFormation templates from existing AWS resources.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--profile", help="AWS CLI profile to use", default=None)
    parser.add_argument(
        "--region",
        help="AWS region (defaults to AWS_REGION, then AWS_DEFAULT_REGION, then ap-northeast-1)",
        default=None,
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help="Seconds between status checks of a running scan or template",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Save to the default output file without prompting",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log AWS calls and poll results"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    resources = subparsers.add_parser(
        "resources", help="Download AWS resources from a scan"
    )
    resources.add_argument(
        "-o", "--output", default=DEFAULT_RESOURCES_FILE, help="output file name"
    )
    resources.add_argument(
        "--new-scan", action="store_true", help="start a new resource scan"
    )
    resources.add_argument(
        "--from-scan", action="store_true", help="choose from existing scans"
    )

    template = subparsers.add_parser(
        "template",
        help="Generate a CloudFormation template from a resources file (or --from-stack)",
    )
    template.add_argument(
        "-i", "--input", default=DEFAULT_RESOURCES_FILE, help="input resources file"
    )
    template.add_argument(
        "-o", "--output", default=DEFAULT_TEMPLATE_FILE, help="output template file"
    )
    template.add_argument(
        "--from-stack",
        metavar="STACK",
        default=None,
        help="use an existing stack as the template base",
    )
    template.add_argument(
        "--format",
        dest="template_format",
        choices=("JSON", "YAML"),
        type=str.upper,
        default=None,
        help="template body format (service default when omitted)",
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    if not verbose:
        return
    # botocore is very chatty at DEBUG.
    for name in ("botocore", "boto3", "urllib3"):
        logging.getLogger(name).setLevel(logging.INFO)


def run(args: argparse.Namespace) -> WorkflowResult:
    """Execute the sub-command selected by ``args``."""

    if args.command == "resources":
        check_scan_source(args.new_scan, args.from_scan)
    settings = Settings.from_args(args)
    logger.debug("Using region %s", settings.region)
    session = boto3.Session(profile_name=settings.profile, region_name=settings.region)
    gateway = CloudFormationGateway.from_session(session)
    interaction = RichInteraction(assume_yes=args.yes)

    if args.command == "resources":
        return run_resources_workflow(
            gateway,
            interaction,
            new_scan=args.new_scan,
            from_scan=args.from_scan,
            output=args.output,
            poll_interval=settings.poll_interval,
        )
    return run_template_workflow(
        gateway,
        interaction,
        input_path=args.input,
        output=args.output,
        from_stack=args.from_stack,
        template_format=args.template_format,
        poll_interval=settings.poll_interval,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point used by ``python -m aws_iac_gen``."""

    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        run(args)
    except IacGenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code
    except (ClientError, BotoCoreError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    return 0


__all__ = ["configure_logging", "main", "parse_args", "run"]
