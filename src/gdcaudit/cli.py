"""CLI entry point: ``gdcaudit analyze``, ``status``, ``requirements``, ``serve``."""

from __future__ import annotations

# Logging before any transitive litellm import
from gdcaudit.logging_config import setup_logging

setup_logging("WARNING")

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

from gdcaudit import __version__  # noqa: E402
from gdcaudit.analysis.schemas import (  # noqa: E402
    ComplianceReport,
    Document,
    Requirement,
)
from gdcaudit.catalogue import get_requirement, load_catalogue  # noqa: E402
from gdcaudit.config import AnalysisConfig, Settings  # noqa: E402
from gdcaudit.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)

cleanup_third_party_handlers()


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"gdcaudit {__version__}")
        return

    if args.command == "analyze":
        _run_analyze(args)
    elif args.command == "status":
        _run_status()
    elif args.command == "requirements":
        _run_requirements()
    elif args.command == "serve":
        _run_serve(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdcaudit",
        description=(
            "Check dental-education documents against GDC "
            "accreditation requirements."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    analyze = sub.add_parser(
        "analyze",
        help="Analyze a text document",
    )
    analyze.add_argument(
        "document",
        type=str,
        help="Path to a UTF-8 text document",
    )
    analyze.add_argument(
        "--requirement",
        "-r",
        action="append",
        default=None,
        help=(
            "Requirement code from the catalogue; repeatable "
            "(default: the whole catalogue)"
        ),
    )
    analyze.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    sub.add_parser(
        "status",
        help="Report whether the model credential is usable",
    )
    sub.add_parser(
        "requirements",
        help="List the bundled requirement catalogue",
    )

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port (default: 8000)",
    )

    return parser


def _select_requirements(codes: list[str] | None) -> list[Requirement]:
    if not codes:
        return list(load_catalogue())
    selected: list[Requirement] = []
    for code in codes:
        try:
            selected.append(get_requirement(code))
        except KeyError:
            known = ", ".join(r.code for r in load_catalogue())
            print(
                f"Error: unknown requirement '{code}'. Valid: {known}",
                file=sys.stderr,
            )
            sys.exit(1)
    return selected


def _run_analyze(args: argparse.Namespace) -> None:
    from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
    from gdcaudit.analysis.scoring import build_report

    path = Path(args.document).resolve()
    if not path.is_file():
        print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)

    requirements = _select_requirements(args.requirement)
    document = Document(
        name=path.name,
        text_content=path.read_text(encoding="utf-8", errors="replace"),
    )

    settings = Settings()
    analyzer = ComplianceAnalyzer(AnalysisConfig.from_settings(settings))

    report = asyncio.run(
        build_report(
            analyzer,
            requirements,
            document,
            max_concurrency=settings.report_max_concurrency,
        )
    )

    if args.format == "json":
        print(
            json.dumps(
                report.model_dump(mode="json", by_alias=True), indent=2
            )
        )
    else:
        _print_report(report)


def _print_report(report: ComplianceReport) -> None:
    print(f"Document: {report.document_name}")
    print(
        f"Overall compliance: {report.overall_score}% "
        f"({report.inspection_readiness})"
    )
    if report.simulated_count:
        print(
            f"Note: {report.simulated_count} verdict(s) are simulated "
            "fallbacks, not model output"
        )
    print()
    for record in report.records:
        verdict = record.result.verdict
        marker = " [simulated]" if record.result.simulated else ""
        print(
            f"  {record.requirement.code:<6} {record.score:>3}%  "
            f"{verdict.status:<14} {record.requirement.title}{marker}"
        )
        for item in verdict.missing_elements[:2]:
            print(f"           missing: {item}")
    if report.critical_actions:
        print("\nCritical actions:")
        for action in report.critical_actions:
            print(f"  - {action}")


def _run_status() -> None:
    from gdcaudit.analysis.invoker import describe_credential

    settings = Settings()
    cred = describe_credential(settings.anthropic_api_key)
    mode = "model" if cred.well_formed else "simulated"
    print(f"Mode: {mode}")
    print(f"Model: {settings.model_identifier}")
    print(f"Credential configured: {cred.configured}")
    print(f"Credential well-formed: {cred.well_formed}")
    print(f"Key preview: {cred.key_preview} ({cred.key_length} chars)")


def _run_requirements() -> None:
    for requirement in load_catalogue():
        print(
            f"{requirement.code:<6} [{requirement.category}] "
            f"{requirement.domain}: {requirement.title}"
        )


def _run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run(
        "gdcaudit.main:app",
        host=args.host,
        port=args.port,
    )


if __name__ == "__main__":
    main()
