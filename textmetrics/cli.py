"""Command-line entry point for textmetrics."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .config import (
    DEFAULT_OCR_LANGUAGE,
    SUPPORTED_OCR_LANGUAGES,
    AnalysisConfig,
    DocumentConfig,
    FetchConfig,
)
from .errors import AllTransportsFailedError, TextMetricsError, describe_error
from .models import CountResults
from .pipeline import analyze_file, analyze_url, count_text

logger = logging.getLogger("textmetrics.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    if first.startswith(("http://", "https://")):
        return ("url", *argv)
    return ("file", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--no-stop-words",
        dest="filter_stop_words",
        action="store_false",
        help="Keep common English function words in the frequency analysis",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=15,
        help="Number of most frequent words to report",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the results object as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_file_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", type=Path, help="PDF, DOCX, TXT, MD or SRT file to count")
    parser.add_argument(
        "--mime",
        default=None,
        help="Declared MIME type; sniffed from the content when omitted",
    )
    parser.add_argument(
        "--ocr-language",
        default=DEFAULT_OCR_LANGUAGE,
        choices=SUPPORTED_OCR_LANGUAGES,
        help="Tesseract language used when a PDF needs OCR",
    )
    _add_common_arguments(parser)


def _add_url_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url", help="Webpage to fetch and count")
    parser.add_argument(
        "--relay-url",
        default=None,
        help="Relay endpoint tried before direct and proxy fetches",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Timeout in seconds for the direct fetch",
    )
    _add_common_arguments(parser)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Count words and characters in text, documents and webpages.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    text_parser = subparsers.add_parser("text", help="Count literal text ('-' reads stdin)")
    text_parser.add_argument("text", help="Text to count, or '-' to read standard input")
    _add_common_arguments(text_parser)

    file_parser = subparsers.add_parser("file", help="Extract and count a document")
    _add_file_arguments(file_parser)

    url_parser = subparsers.add_parser("url", help="Fetch and count a webpage")
    _add_url_arguments(url_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the fetch relay HTTP endpoint")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve_parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if quiet and not verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def format_results(results: CountResults) -> str:
    lines = [
        f"Words:                      {results.word_count}",
        f"Characters (no spaces):     {results.char_count_excluding_spaces}",
        f"Characters (with spaces):   {results.char_count_including_spaces}",
    ]
    analysis = results.repeated_words_analysis
    if analysis is None:
        return "\n".join(lines)

    lines.append(
        f"Unique words:               {analysis.total_unique_words}"
        + (" (stop words filtered)" if analysis.stop_words_filtered else "")
    )
    if analysis.most_repeated_word:
        top = analysis.most_repeated_word
        lines.append(f"Most repeated word:         {top.word} ({top.count}x, {top.percentage:.1f}%)")
    if analysis.top_words:
        lines.append("")
        lines.append(f"{'#':>3}  {'word':<24}{'count':>7}{'%':>8}")
        for rank, entry in enumerate(analysis.top_words, start=1):
            lines.append(f"{rank:>3}  {entry.word:<24}{entry.count:>7}{entry.percentage:>7.1f}%")
    return "\n".join(lines)


def _emit(results: Optional[CountResults], as_json: bool) -> None:
    if as_json:
        payload = results.to_dict() if results is not None else None
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
    elif results is None:
        sys.stdout.write("Nothing to count: the text is empty.\n")
    else:
        sys.stdout.write(format_results(results) + "\n")
    sys.stdout.flush()


def _log_ocr_progress(value: float) -> None:
    logger.debug("OCR progress: %.0f%%", value)


def _run_text(args: argparse.Namespace, analysis: AnalysisConfig) -> Optional[CountResults]:
    text = sys.stdin.read() if args.text == "-" else args.text
    return count_text(text, config=analysis)


def _run_file(args: argparse.Namespace, analysis: AnalysisConfig) -> CountResults:
    config = DocumentConfig(ocr_language=args.ocr_language)
    return analyze_file(
        args.path,
        mime_type=args.mime,
        document_config=config,
        analysis_config=analysis,
        progress=_log_ocr_progress,
    )


def _run_url(args: argparse.Namespace, analysis: AnalysisConfig) -> CountResults:
    config = FetchConfig(relay_endpoint=args.relay_url, direct_timeout=args.timeout)
    return analyze_url(args.url, fetch_config=config, analysis_config=analysis)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    if args.command == "serve":
        _configure_logging(args.verbose)
        from .relay import serve

        serve(args.host, args.port)
        return

    _configure_logging(args.verbose, quiet=args.json)
    analysis = AnalysisConfig(filter_stop_words=args.filter_stop_words, top_words_limit=args.top)
    runners = {"text": _run_text, "file": _run_file, "url": _run_url}

    overall_start = time.perf_counter()
    try:
        results = runners[args.command](args, analysis)
    except AllTransportsFailedError as exc:
        sys.stderr.write(describe_error(exc) + "\n")
        if args.verbose:
            for attempt in exc.attempts:
                logger.debug("%s: %s (%s)", attempt.transport_id, attempt.error_kind, attempt.detail)
        sys.exit(1)
    except TextMetricsError as exc:
        logger.debug("Failed: %s", exc)
        sys.stderr.write(describe_error(exc) + "\n")
        sys.exit(1)
    logger.debug("Finished in %.2fs", time.perf_counter() - overall_start)
    _emit(results, args.json)


if __name__ == "__main__":
    main()
