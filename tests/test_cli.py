from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
from pypdf import PdfReader

from pdf_factory.cli import cli


def test_info_reports_encryption(encrypted_pdf: Path) -> None:
    result = CliRunner().invoke(cli, ["info", str(encrypted_pdf), "--password", "pw1"])

    assert result.exit_code == 0, result.output
    assert "128-bit AES" in result.output


def test_info_fails_on_locked_document(user_locked_pdf: Path) -> None:
    result = CliRunner().invoke(cli, ["info", str(user_locked_pdf)])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_rewrite_removes_security(encrypted_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "open.pdf"
    result = CliRunner().invoke(
        cli,
        ["rewrite", str(encrypted_pdf), "-o", str(output), "--owner-password", "pw1", "--remove-security"],
    )

    assert result.exit_code == 0, result.output
    reader = PdfReader(str(output))
    assert reader.is_encrypted is False
    assert reader.metadata.producer == "PDF Factory"


def test_rewrite_honours_environment(plain_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    result = CliRunner().invoke(
        cli,
        ["rewrite", str(plain_pdf), "-o", str(output)],
        env={"PDF_FACTORY_PRODUCER": "Env Producer"},
    )

    assert result.exit_code == 0, result.output
    assert PdfReader(str(output)).metadata.producer == "Env Producer"


def test_rewrite_wrong_password_exits_with_error(encrypted_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    result = CliRunner().invoke(
        cli, ["rewrite", str(encrypted_pdf), "-o", str(output), "--owner-password", "nope"]
    )

    assert result.exit_code == 1
    assert not output.exists()


def test_secure_applies_permissions(plain_pdf: Path, tmp_path: Path) -> None:
    output = tmp_path / "locked.pdf"
    result = CliRunner().invoke(
        cli,
        [
            "secure",
            str(plain_pdf),
            "-o",
            str(output),
            "--owner-password",
            "owner",
            "--allow-printing",
            "Y",
            "--encryption",
            "aes_128",
        ],
    )

    assert result.exit_code == 0, result.output
    reader = PdfReader(str(output))
    assert reader.is_encrypted is True
    assert reader.decrypt("owner") != 0
    assert len(reader.pages) == 3


def test_create_from_content_file(tmp_path: Path) -> None:
    content = tmp_path / "memo.txt"
    content.write_text("Hello from the CLI", encoding="utf-8")
    output = tmp_path / "memo.pdf"

    result = CliRunner().invoke(
        cli,
        ["create", "-o", str(output), "-t", "Memo", "--content-file", str(content), "--owner-password", "owner"],
    )

    assert result.exit_code == 0, result.output
    reader = PdfReader(str(output))
    reader.decrypt("owner")
    assert reader.metadata.title == "Memo"
    assert "Hello from the CLI" in reader.pages[0].extract_text()


def test_create_requires_owner_password(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["create", "-o", str(tmp_path / "x.pdf"), "-t", "T"])

    assert result.exit_code != 0


def test_info_reads_settings_from_environment(plain_pdf: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["info", str(plain_pdf)],
        env={"PDF_FACTORY_DEFAULT_OWNER_PASSWORD": ""},
    )

    assert result.exit_code == 1
    assert "PDF_FACTORY_DEFAULT_OWNER_PASSWORD" in result.output
