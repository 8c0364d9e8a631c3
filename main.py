"""Command-line entrypoint for the grammar checker."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from grammar_checker import (
    CheckerSettings,
    GrammarCheckError,
    GrammarCheckResult,
    apply_all_suggestions,
    build_checker,
)
from grammar_checker.llm.provider import LLMProviderError, ProviderStatus
from grammar_checker.llm.provider_registry import available_providers

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check text for grammar, spelling, and punctuation errors using an LLM.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a sentence
  python main.py "Their going to the park tomorow"

  # Check a file and print the result as JSON
  python main.py --file essay.txt --json

  # Read from stdin, use Mistral with Gemini as a fallback
  cat essay.txt | python main.py --provider mistral --fallback gemini

Environment Variables:
  OPENAI_API_KEY           OpenAI API key (OPENAI_API_KEY_ENV_VAR is also accepted)
  OPENAI_MODEL             Override the OpenAI model (default: gpt-4o)
  OPENAI_BASE_URL          Override the OpenAI API base URL
  MISTRAL_API_KEY          Mistral API key
  GEMINI_API_KEY           Gemini API key
  LLM_PRIMARY              Primary LLM provider (default: openai)
  LLM_FALLBACK             Fallback providers (comma-separated)
        """,
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="Text to check. Reads --file or stdin when omitted.",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        help="Read the text to check from this file (UTF-8).",
    )
    parser.add_argument(
        "--provider",
        choices=available_providers(),
        help="LLM provider to use (default: LLM_PRIMARY, or openai).",
    )
    parser.add_argument(
        "--fallback",
        nargs="*",
        choices=available_providers(),
        metavar="PROVIDER",
        help="Providers to try, in order, when the primary one is out of quota.",
    )
    parser.add_argument(
        "--dotenv",
        type=Path,
        default=None,
        help="Load environment variables from this .env file.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON.",
    )
    parser.add_argument(
        "--apply-all",
        action="store_true",
        help="Apply every non-overlapping suggestion and report the corrected text.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )
    return parser


def read_input(args: argparse.Namespace) -> str:
    if args.text is not None and args.file is not None:
        raise ValueError("Pass the text either as an argument or with --file, not both")
    if args.text is not None:
        return args.text
    if args.file is not None:
        return args.file.read_text(encoding="utf-8")
    return sys.stdin.read()


def format_report(result: GrammarCheckResult) -> str:
    summary = result.summary
    lines = [
        f"Accuracy: {summary.accuracy_score}%  "
        f"({summary.total_errors} error(s) in {summary.processing_time:.2f}s)",
        f"  grammar: {summary.grammar_errors}  "
        f"spelling: {summary.spelling_errors}  "
        f"punctuation: {summary.punctuation_errors}",
    ]
    for number, error in enumerate(result.errors, start=1):
        lines.append(
            f"{number}. [{error.type.value}] {error.start_index}-{error.end_index} "
            f"'{error.original_text}' -> '{error.suggestion}'"
        )
        if error.message:
            lines.append(f"   {error.message}")
    return "\n".join(lines)


def _log_provider_status(
    provider_name: str, status: ProviderStatus, error: Exception | None
) -> None:
    if status is ProviderStatus.SUCCESS:
        logger.info("Provider %s answered", provider_name)
    else:
        logger.warning("Provider %s reported %s: %s", provider_name, status.value, error)


def run_cli(args: argparse.Namespace) -> int:
    try:
        text = read_input(args)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    settings = CheckerSettings.from_env(args.dotenv)
    if args.provider:
        settings.primary = args.provider
    if args.fallback:
        settings.fallbacks = list(args.fallback)

    try:
        checker = build_checker(settings, reporter=_log_provider_status)
    except (LLMProviderError, ValueError) as exc:
        print(f"Error: could not configure LLM providers: {exc}", file=sys.stderr)
        return 1
    logger.info("Provider order: %s", ", ".join(checker.service.provider_order()))

    try:
        result = asyncio.run(checker.check_grammar(text))
    except GrammarCheckError as exc:
        logger.exception("Grammar check failed")
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.apply_all:
        result = apply_all_suggestions(result)

    if args.json:
        print(result.model_dump_json(by_alias=True, indent=2))
    else:
        print(format_report(result))
        if args.apply_all:
            print("\nCorrected text:\n" + result.text)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    return run_cli(args)


if __name__ == "__main__":
    raise SystemExit(main())
