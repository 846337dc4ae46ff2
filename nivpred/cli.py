"""Command-line entry point for bedside use of the risk engine."""
from __future__ import annotations

import argparse
import logging
import sys
from contextlib import closing
from pathlib import Path
from typing import List, Optional

from .api.core.config import get_settings
from .api.core.logging import setup_logging
from .api.repositories.history_repo import HistoryRepository, connect
from .api.services.assessment_service import AssessmentService, now_iso
from .api.services.export_service import SnapshotImportError, export_snapshot, import_snapshot
from .content import load_preset, preset_names
from .schemas.assessment import RiskAssessment
from .schemas.snapshot import ClinicalSnapshot

logger = logging.getLogger("nivpred.cli")

EXIT_INPUT_ERROR = 2


def _load_snapshot(args: argparse.Namespace, repo: Optional[HistoryRepository] = None) -> ClinicalSnapshot:
    if args.preset:
        try:
            return ClinicalSnapshot.model_validate(load_preset(args.preset))
        except KeyError as exc:
            raise SnapshotImportError(
                f"Unknown preset {args.preset!r}; choose from {', '.join(preset_names())}"
            ) from exc
    if args.file:
        if args.file == "-":
            return import_snapshot(sys.stdin.read())
        try:
            text = Path(args.file).read_text(encoding="utf-8")
        except OSError as exc:
            raise SnapshotImportError(f"Cannot read {args.file}: {exc.strerror}") from exc
        return import_snapshot(text)
    if repo is not None:
        last = repo.load_last()
        if last is not None:
            return last
    raise SnapshotImportError("No snapshot given: use --file, --preset or save one first")


def render(assessment: RiskAssessment) -> str:
    lines = [
        f"{assessment.badge}  {assessment.tier}  {assessment.score}/100",
        "",
        assessment.summary,
    ]
    if assessment.oxygenation_context:
        lines.append(f"Oxygenation: {assessment.oxygenation_context}")
    lines.extend(["", assessment.explanation])
    if assessment.top_factors:
        lines.append("Main factors: " + "; ".join(assessment.top_factors))
    lines.append("")
    lines.extend(f"- {action}" for action in assessment.actions)
    return "\n".join(lines)


def _cmd_assess(args: argparse.Namespace) -> int:
    settings = get_settings()
    service = AssessmentService(settings.policy_id)
    with closing(connect(settings.history_db)) as conn:
        repo = HistoryRepository(conn, settings.history_limit)
        snapshot = _load_snapshot(args, repo)
        if args.save:
            assessment, _ = service.evaluate_and_record(repo, snapshot, args.evaluated_at)
        else:
            assessment = service.evaluate(snapshot, args.evaluated_at)
    if args.json:
        print(assessment.model_dump_json(indent=2))
    else:
        print(render(assessment))
    return 0


def _cmd_history(args: argparse.Namespace) -> int:
    settings = get_settings()
    with closing(connect(settings.history_db)) as conn:
        repo = HistoryRepository(conn, settings.history_limit)
        if args.clear:
            repo.clear()
            print("History cleared.")
            return 0
        entries = repo.list()
    if not entries:
        print("No history yet.")
        return 0
    for entry in entries:
        print(f"#{entry.id}  {entry.tier} • {entry.score}/100 • {entry.evaluated_at}")
        if entry.brief:
            print(f"    {entry.brief}")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    snapshot = _load_snapshot(args)
    document = export_snapshot(snapshot, exported_at=now_iso())
    if args.output:
        Path(args.output).write_text(document + "\n", encoding="utf-8")
        logger.info("Snapshot exported to %s", args.output)
    else:
        print(document)
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "nivpred.api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nivpred", description="Pediatric NIV failure risk (decision support).")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_source(cmd: argparse.ArgumentParser) -> None:
        group = cmd.add_mutually_exclusive_group()
        group.add_argument("--file", "-f", help="snapshot JSON document ('-' for stdin)")
        group.add_argument("--preset", "-p", help="example snapshot name")

    assess_cmd = sub.add_parser("assess", help="compute the risk assessment for a snapshot")
    add_source(assess_cmd)
    assess_cmd.add_argument("--save", action="store_true", help="record the result in the local history")
    assess_cmd.add_argument("--json", action="store_true", help="print the assessment as JSON")
    assess_cmd.add_argument("--evaluated-at", help="timestamp echoed into the summary")
    assess_cmd.set_defaults(handler=_cmd_assess)

    history_cmd = sub.add_parser("history", help="list recent assessments")
    history_cmd.add_argument("--clear", action="store_true", help="delete local history and the saved snapshot")
    history_cmd.set_defaults(handler=_cmd_history)

    export_cmd = sub.add_parser("export", help="write a snapshot as a portable JSON document")
    add_source(export_cmd)
    export_cmd.add_argument("--output", "-o", help="destination file (default: stdout)")
    export_cmd.set_defaults(handler=_cmd_export)

    serve_cmd = sub.add_parser("serve", help="run the stateless HTTP API")
    serve_cmd.add_argument("--host")
    serve_cmd.add_argument("--port", type=int)
    serve_cmd.set_defaults(handler=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(get_settings().log_level)
    try:
        return args.handler(args)
    except SnapshotImportError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
