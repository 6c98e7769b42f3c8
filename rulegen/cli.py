"""CLI entrypoints for rulegen commands."""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict
from pathlib import Path
from typing import List

from .classifier.comment import CommentClassifier
from .config import ConfigError, load_config
from .corpus.tree import LocalFileTree
from .errors import UnknownGeneratorError
from .llm.base import build_text_generator
from .logging import configure_logging
from .models import Comment, RepositoryRef
from .pipeline import MODES, SINGLE, ConversionPipeline, ConversionReport


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rulegen",
        description="Turn code review comments into convention rule files.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify a single comment and print its keyword/category signature.",
    )
    _add_verbose_option(classify_parser, suppress_default=True)
    classify_parser.add_argument("text", help="Comment text to classify.")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert review comments into rule files inside a repository checkout.",
    )
    _add_verbose_option(convert_parser, suppress_default=True)
    convert_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    convert_parser.add_argument(
        "--comments",
        required=True,
        help="JSON file holding a list of comment objects.",
    )
    convert_parser.add_argument(
        "--mode",
        choices=MODES,
        default=SINGLE,
        help="Convention gate: single comment, batch review or discussion thread.",
    )
    convert_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated files instead of writing them.",
    )
    convert_parser.add_argument("--owner", default="local", help="Repository owner.")
    convert_parser.add_argument("--repo", default=None, help="Repository name (defaults to the directory name).")
    convert_parser.add_argument("--branch", default="main", help="Branch the rule files target.")
    convert_parser.add_argument("--pr", type=int, default=None, help="Pull request number for attribution.")
    convert_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write DEBUG logs (routing scores and candidates) to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for rulegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(getattr(args, "verbose", False)),
        log_file=getattr(args, "log_file", None),
    )

    if args.command == "classify":
        _run_classify(args.text)
    elif args.command == "convert":
        try:
            report = _run_convert(args)
        except (ConfigError, UnknownGeneratorError) as exc:
            parser.exit(1, f"{exc}\n")
        except (OSError, ValueError) as exc:
            parser.exit(1, f"rulegen convert failed: {exc}\nRun with --verbose for more details.\n")
        _print_report(report, dry_run=bool(args.dry_run))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_classify(text: str) -> None:
    classifier = CommentClassifier()
    parsed = classifier.classify(text)
    payload = asdict(parsed)
    payload["is_convention"] = classifier.is_convention_comment(text)
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _run_convert(args: argparse.Namespace) -> ConversionReport:
    root = Path(args.path).expanduser().resolve()
    config = load_config(root)
    comments = _load_comments(Path(args.comments))
    repository = RepositoryRef(
        owner=args.owner,
        name=args.repo or root.name,
        branch=args.branch,
        pr_number=args.pr,
    )
    tree = LocalFileTree(root)
    pipeline = ConversionPipeline(tree, config, llm=build_text_generator(config.llm, root))
    return asyncio.run(_convert(pipeline, tree, comments, repository, args.mode, args.dry_run))


async def _convert(
    pipeline: ConversionPipeline,
    tree: LocalFileTree,
    comments: List[Comment],
    repository: RepositoryRef,
    mode: str,
    dry_run: bool,
) -> ConversionReport:
    report = await pipeline.convert(comments, repository, mode)
    if not dry_run:
        for result in report.results:
            await tree.write_file(result.file_path, result.content)
    return report


def _load_comments(path: Path) -> List[Comment]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("comments", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path} must contain a list of comments")
    return [Comment.from_dict(item) for item in payload if isinstance(item, dict)]


def _print_report(report: ConversionReport, *, dry_run: bool) -> None:
    for result in report.results:
        action = "update" if result.is_update else "create"
        if dry_run:
            print(f"--- {result.file_path} ({action}, {result.project_type}) ---")
            print(result.content.rstrip())
        else:
            print(f"{action.capitalize()}d {result.file_path}")
    if report.rejected:
        print(f"Skipped {len(report.rejected)} non-convention comment(s)")
    for failure in report.failures:
        print(f"Failed {failure.comment_id} ({failure.stage}): {failure.message}")
    if not report.results and not report.failures:
        print("No rule files generated")


__all__ = ["main"]
