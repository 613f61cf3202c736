from __future__ import annotations

import json

import pytest
import yaml

from cvgen.utils.logging import reset_logging


@pytest.fixture(autouse=True)
def fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def db_args(tmp_path) -> list[str]:
    return ["--log-level", "ERROR", "--db", str(tmp_path / "cli.db")]


@pytest.fixture
def profile_file(tmp_path, sample_resume_data):
    path = tmp_path / "profile.yaml"
    path.write_text(yaml.safe_dump(sample_resume_data), encoding="utf-8")
    return path


def run_json(capsys, argv: list[str]):
    from cvgen.__main__ import main

    exit_code = main(argv)
    captured = capsys.readouterr()
    assert exit_code == 0, captured.err
    return json.loads(captured.out)


def test_cli_without_command_prints_help(capsys) -> None:
    from cvgen.__main__ import main

    assert main([]) == 0
    assert "usage: cvgen" in capsys.readouterr().out


def test_cli_parser_supports_resource_subcommands() -> None:
    from cvgen.__main__ import create_parser

    parser = create_parser()

    patch_args = parser.parse_args(["profile", "patch", "skills", "skills.json"])
    assert (patch_args.command, patch_args.action, patch_args.section) == (
        "profile",
        "patch",
        "skills",
    )

    list_args = parser.parse_args(["cv", "list", "--page", "2", "--page-size", "5"])
    assert (list_args.page, list_args.page_size) == (2, 5)

    letter_args = parser.parse_args(
        ["ai", "generate-letter", "--job-title", "Dev", "--company", "Acme", "--timeout", "30"]
    )
    assert letter_args.timeout == 30.0
    assert letter_args.user == "local"


def test_cli_profile_set_from_yaml_and_show(capsys, db_args, profile_file) -> None:
    saved = run_json(capsys, [*db_args, "profile", "set", str(profile_file)])
    assert saved["resume_data"]["basics"]["name"] == "Ada Lovelace"

    shown = run_json(capsys, [*db_args, "profile", "show"])
    assert shown["id"] == saved["id"]


def test_cli_profile_show_without_profile_is_empty(capsys, db_args) -> None:
    shown = run_json(capsys, [*db_args, "profile", "show"])

    assert shown["id"] is None
    assert shown["resume_data"]["work"] == []


def test_cli_profile_patch_section_from_json(capsys, db_args, profile_file, tmp_path) -> None:
    skills = tmp_path / "skills.json"
    skills.write_text(json.dumps([{"name": "Rust"}]), encoding="utf-8")

    run_json(capsys, [*db_args, "profile", "set", str(profile_file)])
    patched = run_json(capsys, [*db_args, "profile", "patch", "skills", str(skills)])

    assert patched["resume_data"]["skills"] == [{"name": "Rust"}]


def test_cli_invalid_section_errors_cleanly(capsys, db_args, tmp_path) -> None:
    from cvgen.__main__ import main

    payload = tmp_path / "payload.json"
    payload.write_text("[]", encoding="utf-8")

    assert main([*db_args, "profile", "patch", "hobbies", str(payload)]) == 1
    assert "invalid section name" in capsys.readouterr().err


def test_cli_invalid_email_errors_cleanly(capsys, db_args, tmp_path) -> None:
    from cvgen.__main__ import main

    profile = tmp_path / "profile.json"
    profile.write_text(json.dumps({"basics": {"email": "not-an-email"}}), encoding="utf-8")

    assert main([*db_args, "profile", "set", str(profile)]) == 1
    assert "email" in capsys.readouterr().err


def test_cli_missing_file_errors_cleanly(capsys, db_args, tmp_path) -> None:
    from cvgen.__main__ import main

    assert main([*db_args, "profile", "set", str(tmp_path / "missing.yaml")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_cli_cv_lifecycle(capsys, db_args, profile_file) -> None:
    run_json(capsys, [*db_args, "profile", "set", str(profile_file)])

    created = run_json(capsys, [*db_args, "cv", "create", "--name", "Base"])
    assert created["cv_data"]["basics"]["name"] == "Ada Lovelace"

    copy = run_json(capsys, [*db_args, "cv", "duplicate", created["id"]])
    assert copy["name"] == "Base (Copy)"

    renamed = run_json(capsys, [*db_args, "cv", "update", copy["id"], "--name", "Renamed"])
    assert renamed["name"] == "Renamed"

    page = run_json(capsys, [*db_args, "cv", "list"])
    assert page["total"] == 2
    assert page["items"][0]["id"] == copy["id"]

    assert run_json(capsys, [*db_args, "cv", "delete", created["id"]]) == {"deleted": True}


def test_cli_unknown_cv_errors_cleanly(capsys, db_args) -> None:
    from cvgen.__main__ import main

    assert main([*db_args, "cv", "show", "00000000-0000-4000-8000-000000000000"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_letter_lifecycle(capsys, db_args, tmp_path) -> None:
    text = tmp_path / "letter.txt"
    text.write_text("Dear Acme,\n\nHello.", encoding="utf-8")

    created = run_json(
        capsys,
        [*db_args, "letter", "create", str(text), "--job-title", "Dev", "--company", "Acme"],
    )
    assert created["content"] == "Dear Acme,\n\nHello."

    listed = run_json(capsys, [*db_args, "letter", "list"])
    assert [item["id"] for item in listed] == [created["id"]]
    assert "content" not in listed[0]
    assert listed[0]["word_count"] == 3

    text.write_text("Dear Acme team,", encoding="utf-8")
    updated = run_json(capsys, [*db_args, "letter", "update", created["id"], str(text)])
    assert updated["content"] == "Dear Acme team,"


def test_cli_credits_show_and_grant(capsys, db_args) -> None:
    shown = run_json(capsys, [*db_args, "credits", "show"])
    granted = run_json(capsys, [*db_args, "credits", "grant", "5"])

    assert granted["paid_credits"] == 5
    assert granted["remaining"] == shown["remaining"] + 5


def test_cli_credits_grant_rejects_non_positive(capsys, db_args) -> None:
    from cvgen.__main__ import main

    assert main([*db_args, "credits", "grant", "0"]) == 1


def test_cli_generate_cv_uses_backend(
    capsys, monkeypatch, db_args, profile_file, tmp_path, fake_backend
) -> None:
    monkeypatch.setattr("cvgen.ai.backend.LiteLLMBackend", lambda: fake_backend)
    job = tmp_path / "job.txt"
    job.write_text("Build payment APIs in Python.", encoding="utf-8")

    run_json(capsys, [*db_args, "profile", "set", str(profile_file)])
    before = run_json(capsys, [*db_args, "credits", "show"])
    result = run_json(
        capsys,
        [*db_args, "ai", "generate-cv", str(job), "--job-title", "Backend Engineer"],
    )

    assert result["cv"]["name"] == "Backend Engineer CV"
    assert result["analysis"]["match_score"] == 82
    assert result["credits_remaining"] == before["remaining"] - 1
    assert fake_backend.call_names() == ["analyze", "tailor"]


def test_cli_generate_letter_links_cv(
    capsys, monkeypatch, db_args, profile_file, fake_backend
) -> None:
    monkeypatch.setattr("cvgen.ai.backend.LiteLLMBackend", lambda: fake_backend)

    run_json(capsys, [*db_args, "profile", "set", str(profile_file)])
    cv = run_json(capsys, [*db_args, "cv", "create"])
    result = run_json(
        capsys,
        [
            *db_args,
            "ai",
            "generate-letter",
            "--job-title",
            "Dev",
            "--company",
            "Acme",
            "--cv-id",
            cv["id"],
        ],
    )

    assert result["cover_letter"]["cv_id"] == cv["id"]
    assert result["cover_letter"]["content"].startswith("Dear Hiring Manager")


def test_cli_generation_without_profile_errors_cleanly(
    capsys, monkeypatch, db_args, tmp_path, fake_backend
) -> None:
    from cvgen.__main__ import main

    monkeypatch.setattr("cvgen.ai.backend.LiteLLMBackend", lambda: fake_backend)
    job = tmp_path / "job.txt"
    job.write_text("Build payment APIs in Python.", encoding="utf-8")

    assert main([*db_args, "ai", "analyze", str(job)]) == 1
    assert "profile not found" in capsys.readouterr().err
    assert fake_backend.calls == []
