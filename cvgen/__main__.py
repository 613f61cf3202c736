"""Main entry point for the cvgen command-line interface."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from cvgen import __version__
from cvgen.ai.errors import GenerationError, GenerationPipelineError
from cvgen.ai.models import GenerateCoverLetterRequest, GenerateCVRequest
from cvgen.config.settings import Settings
from cvgen.cover_letter.models import CreateCoverLetterInput
from cvgen.cover_letter.repository import CoverLetterRepository
from cvgen.cover_letter.service import CoverLetterNotFoundError, CoverLetterService
from cvgen.credits.repository import CreditRepository
from cvgen.credits.service import CreditLedger, OutOfCreditsError
from cvgen.cv.models import CreateCVInput, UpdateCVInput
from cvgen.cv.repository import CVRepository
from cvgen.cv.service import CVNotFoundError, CVService
from cvgen.profile.repository import ProfileRepository
from cvgen.profile.service import (
    InvalidProfileDataError,
    ProfileNotFoundError,
    ProfileService,
)
from cvgen.resume.models import ResumeDocument
from cvgen.resume.sections import valid_sections
from cvgen.storage.database import Database
from cvgen.utils.logging import configure_logging

# Errors reported to the user as a one-line message with exit code 1
USER_ERRORS = (
    ValueError,
    FileNotFoundError,
    ProfileNotFoundError,
    InvalidProfileDataError,
    CVNotFoundError,
    CoverLetterNotFoundError,
    OutOfCreditsError,
    GenerationPipelineError,
    GenerationError,
)


def _load_data_file(path: Path) -> Any:
    """Load a JSON or YAML file.

    Files ending in .yaml/.yml are read as YAML, .json as JSON, anything
    else is sniffed: JSON if it looks like JSON, YAML otherwise.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json" or (
        suffix not in {".yaml", ".yml"} and raw.lstrip().startswith(("{", "["))
    ):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON file: {path}") from e

    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML file: {path}") from e


def _load_mapping(path: Path) -> dict:
    data = _load_data_file(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"File must contain a mapping/dict: {path}")
    return data


def _read_text(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _print_json(payload: object) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    print(json.dumps(payload, indent=2, default=_default))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="cvgen",
        description="cvgen: master profile, tailored CVs and cover letters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cvgen profile set profile.yaml
  python -m cvgen profile patch skills skills.json
  python -m cvgen ai generate-cv job.txt --job-title "Backend Engineer"
  python -m cvgen credits show
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the SQLite database (overrides settings)",
    )
    parser.add_argument(
        "--user",
        default="local",
        help="User identity to act as (default: local)",
    )

    subparsers = parser.add_subparsers(dest="command", title="commands")

    # Profile
    profile_parser = subparsers.add_parser("profile", help="Manage the master profile")
    profile_sub = profile_parser.add_subparsers(dest="action", required=True)
    profile_sub.add_parser("show", help="Print the master profile")
    set_parser = profile_sub.add_parser("set", help="Replace the whole profile")
    set_parser.add_argument("file", type=Path, help="JSON Resume document (JSON or YAML)")
    patch_parser = profile_sub.add_parser("patch", help="Replace one profile section")
    patch_parser.add_argument("section", help=f"One of: {', '.join(valid_sections())}")
    patch_parser.add_argument("file", type=Path, help="Section payload (JSON or YAML)")
    profile_sub.add_parser("delete", help="Delete the master profile")

    # CVs
    cv_parser = subparsers.add_parser("cv", help="Manage CVs")
    cv_sub = cv_parser.add_subparsers(dest="action", required=True)
    list_parser = cv_sub.add_parser("list", help="List CVs, newest first")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--page-size", type=int, default=None)
    show_parser = cv_sub.add_parser("show", help="Print one CV")
    show_parser.add_argument("id")
    cv_create_parser = cv_sub.add_parser("create", help="Create a CV from the profile")
    cv_create_parser.add_argument("--name", default=None)
    cv_create_parser.add_argument("--template", default=None)
    update_parser = cv_sub.add_parser("update", help="Update a CV")
    update_parser.add_argument("id")
    update_parser.add_argument("--name", default=None)
    update_parser.add_argument("--template", default=None)
    update_parser.add_argument(
        "--data", type=Path, default=None, help="New CV document (JSON or YAML)"
    )
    duplicate_parser = cv_sub.add_parser("duplicate", help="Copy a CV")
    duplicate_parser.add_argument("id")
    delete_parser = cv_sub.add_parser("delete", help="Delete a CV")
    delete_parser.add_argument("id")

    # Cover letters
    letter_parser = subparsers.add_parser("letter", help="Manage cover letters")
    letter_sub = letter_parser.add_subparsers(dest="action", required=True)
    letter_sub.add_parser("list", help="List cover letters, newest first")
    letter_show = letter_sub.add_parser("show", help="Print one cover letter")
    letter_show.add_argument("id")
    letter_create = letter_sub.add_parser("create", help="Save a hand-written letter")
    letter_create.add_argument("file", type=Path, help="Text file with the letter")
    letter_create.add_argument("--cv-id", default=None)
    letter_create.add_argument("--job-title", default=None)
    letter_create.add_argument("--company", default=None)
    letter_update = letter_sub.add_parser("update", help="Replace a letter's text")
    letter_update.add_argument("id")
    letter_update.add_argument("file", type=Path, help="Text file with the letter")
    letter_delete = letter_sub.add_parser("delete", help="Delete a cover letter")
    letter_delete.add_argument("id")

    # AI generation
    ai_parser = subparsers.add_parser("ai", help="AI-assisted generation")
    ai_sub = ai_parser.add_subparsers(dest="action", required=True)
    analyze_parser = ai_sub.add_parser("analyze", help="Analyze profile fit for a job")
    analyze_parser.add_argument("job_file", type=Path, help="Job description text file")
    generate_cv_parser = ai_sub.add_parser(
        "generate-cv", help="Generate a tailored CV (uses one credit)"
    )
    generate_cv_parser.add_argument("job_file", type=Path, help="Job description text file")
    generate_cv_parser.add_argument("--name", default=None)
    generate_cv_parser.add_argument("--job-title", default=None)
    generate_cv_parser.add_argument("--company", default=None)
    generate_cv_parser.add_argument("--job-url", default=None)
    letter_gen_parser = ai_sub.add_parser(
        "generate-letter", help="Generate a cover letter (uses one credit)"
    )
    letter_gen_parser.add_argument("--job-title", required=True)
    letter_gen_parser.add_argument("--company", required=True)
    letter_gen_parser.add_argument("--job-file", type=Path, default=None)
    letter_gen_parser.add_argument("--cv-id", default=None)
    for generation_parser in (analyze_parser, generate_cv_parser, letter_gen_parser):
        generation_parser.add_argument(
            "--timeout",
            type=float,
            default=None,
            help="Deadline in seconds for the whole request",
        )

    # Credits
    credits_parser = subparsers.add_parser("credits", help="Generation credits")
    credits_sub = credits_parser.add_subparsers(dest="action", required=True)
    credits_sub.add_parser("show", help="Show the credit balance")
    grant_parser = credits_sub.add_parser("grant", help="Add paid credits")
    grant_parser.add_argument("amount", type=int)

    return parser


async def _run_profile(parsed: argparse.Namespace, database: Database) -> object:
    service = ProfileService(ProfileRepository(database))
    user = parsed.user

    if parsed.action == "show":
        return await service.get_profile(user)
    if parsed.action == "set":
        return await service.create_or_update(user, _load_mapping(parsed.file))
    if parsed.action == "patch":
        return await service.update_section(user, parsed.section, _load_data_file(parsed.file))

    await service.delete_profile(user)
    return {"deleted": True}


async def _run_cv(
    parsed: argparse.Namespace, database: Database, settings: Settings
) -> object:
    service = CVService(CVRepository(database), ProfileRepository(database), settings)
    user = parsed.user

    if parsed.action == "list":
        return await service.list_cvs(user, page=parsed.page, page_size=parsed.page_size)
    if parsed.action == "show":
        return await service.get_cv(user, parsed.id)
    if parsed.action == "create":
        return await service.create_cv(
            user, CreateCVInput(name=parsed.name, template_id=parsed.template)
        )
    if parsed.action == "update":
        cv_data = (
            ResumeDocument.from_dict(_load_mapping(parsed.data)) if parsed.data else None
        )
        return await service.update_cv(
            user,
            parsed.id,
            UpdateCVInput(name=parsed.name, cv_data=cv_data, template_id=parsed.template),
        )
    if parsed.action == "duplicate":
        return await service.duplicate_cv(user, parsed.id)

    await service.delete_cv(user, parsed.id)
    return {"deleted": True}


async def _run_letter(parsed: argparse.Namespace, database: Database) -> object:
    service = CoverLetterService(CoverLetterRepository(database))
    user = parsed.user

    if parsed.action == "list":
        letters = await service.list_cover_letters(user)
        return [letter.to_dict(include_content=False) for letter in letters]
    if parsed.action == "show":
        return await service.get_cover_letter(user, parsed.id)
    if parsed.action == "create":
        return await service.create_cover_letter(
            user,
            CreateCoverLetterInput(
                content=_read_text(parsed.file),
                cv_id=parsed.cv_id,
                job_title=parsed.job_title,
                company_name=parsed.company,
            ),
        )
    if parsed.action == "update":
        return await service.update_cover_letter(user, parsed.id, _read_text(parsed.file))

    await service.delete_cover_letter(user, parsed.id)
    return {"deleted": True}


def _build_ledger(database: Database, settings: Settings) -> CreditLedger:
    return CreditLedger(CreditRepository(database), settings)


async def _run_ai(
    parsed: argparse.Namespace, database: Database, settings: Settings
) -> object:
    from cvgen.ai.backend import LiteLLMBackend
    from cvgen.ai.service import GenerationService

    profiles = ProfileRepository(database)
    service = GenerationService(
        backend=LiteLLMBackend(),
        ledger=_build_ledger(database, settings),
        profiles=profiles,
        cvs=CVService(CVRepository(database), profiles, settings),
        cover_letters=CoverLetterService(CoverLetterRepository(database)),
    )
    user = parsed.user

    if parsed.action == "analyze":
        return await service.analyze_job(
            user, _read_text(parsed.job_file), timeout=parsed.timeout
        )
    if parsed.action == "generate-cv":
        request = GenerateCVRequest(
            job_description=_read_text(parsed.job_file),
            cv_name=parsed.name,
            job_title=parsed.job_title,
            company_name=parsed.company,
            job_url=parsed.job_url,
        )
        return await service.generate_cv(user, request, timeout=parsed.timeout)

    request = GenerateCoverLetterRequest(
        job_title=parsed.job_title,
        company_name=parsed.company,
        job_description=_read_text(parsed.job_file) if parsed.job_file else None,
        cv_id=parsed.cv_id,
    )
    return await service.generate_cover_letter(user, request, timeout=parsed.timeout)


async def _run_credits(
    parsed: argparse.Namespace, database: Database, settings: Settings
) -> object:
    ledger = _build_ledger(database, settings)
    if parsed.action == "grant":
        return await ledger.grant(parsed.user, parsed.amount)
    return await ledger.get_or_create(parsed.user)


async def _run_command(parsed: argparse.Namespace, settings: Settings) -> object:
    async with Database(settings.database_path) as database:
        if parsed.command == "profile":
            return await _run_profile(parsed, database)
        if parsed.command == "cv":
            return await _run_cv(parsed, database, settings)
        if parsed.command == "letter":
            return await _run_letter(parsed, database)
        if parsed.command == "ai":
            return await _run_ai(parsed, database, settings)
        return await _run_credits(parsed, database, settings)


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    if parsed.db is not None:
        settings.database_path = parsed.db

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    # If no command specified, show help
    if parsed.command is None:
        parser.print_help()
        return 0

    logger.debug(f"cvgen v{__version__} running {parsed.command} {parsed.action}")

    try:
        result = asyncio.run(_run_command(parsed, settings))
    except USER_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_json(result)
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
