"""
Command-line interface for PDF Factory.
"""

import os
import sys

import click
from rich.console import Console
from rich.table import Table

from pdf_factory.config import RewriterSettings
from pdf_factory.exceptions import PDFFactoryException
from pdf_factory.permissions import CAPABILITY_BITS
from pdf_factory.rewriter import RewriteEngine
from pdf_factory.types import RewriteOutcome, RewriteSpec, SecurityProfile, SecuritySettings
from pdf_factory.utils import format_file_size

console = Console()

ENCRYPTION_CHOICES = ["RC4_40", "RC4_128", "AES_128", "AES_256"]


def _engine() -> RewriteEngine:
    try:
        settings = RewriterSettings.from_env()
    except ValueError as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)
    return RewriteEngine(settings=settings)


def _profile_table(title, profile: SecurityProfile) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Encrypted", "Yes" if profile.encrypted else "No")
    table.add_row("Algorithm", profile.algorithm_name)
    table.add_row("Permissions", str(profile.permission_mask))
    for name, granted in profile.permissions.as_dict().items():
        label = name.replace("allow_", "").replace("_", " ").capitalize()
        table.add_row(label, "[green]Yes[/green]" if granted else "[red]No[/red]")
    table.add_row("Owner Password", "Yes" if profile.owner_password_present else "No")
    table.add_row("User Password", "Yes" if profile.user_password_present else "No")
    if profile.pdf_version:
        table.add_row("PDF Version", profile.pdf_version)
    table.add_row("Creator", profile.creator)
    table.add_row("Producer", profile.producer)
    return table


def _report(outcome: RewriteOutcome, output) -> None:
    if not outcome.success:
        console.print(f"\n[bold red]✗ Error:[/bold red] {outcome.message}")
        sys.exit(1)

    if outcome.output_path is None and outcome.pdf_bytes is not None:
        with open(output, "wb") as handle:
            handle.write(outcome.pdf_bytes)
        path = output
    else:
        path = outcome.output_path

    console.print(f"\n[bold green]✓ {outcome.message}[/bold green]")
    console.print(f"[dim]Output file: {os.path.abspath(path)}[/dim]")
    console.print(f"[dim]Size: {format_file_size(os.path.getsize(path))}[/dim]")
    if outcome.new_security_info is not None:
        console.print()
        console.print(_profile_table("Output Security", outcome.new_security_info))
    console.print()


def permission_options(func):
    """Attach one ``--allow-*`` Y/N option per capability."""

    for name in reversed(list(CAPABILITY_BITS)):
        flag = "--" + name.replace("_", "-")
        func = click.option(
            flag,
            name,
            default="N",
            show_default=True,
            help=f"Grant {name.replace('allow_', '').replace('_', ' ')} (Y/N)",
        )(func)
    return func


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    PDF Factory CLI - Rewrite, de-brand and secure PDF files.
    """
    pass


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option('--password', '-p', default=None, help='Owner or user password of the PDF')
def show_info(input_pdf, password):
    """
    Display the security profile of a PDF file.

    Example:

        pdf-factory info input.pdf
    """
    try:
        profile = _engine().extract_security_profile(input_pdf, password)
    except PDFFactoryException as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    console.print()
    console.print(_profile_table(f"PDF Security: {os.path.basename(input_pdf)}", profile))
    console.print(f"[dim]File size: {format_file_size(os.path.getsize(input_pdf))}[/dim]")
    console.print()


@cli.command(name="rewrite")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option('--output', '-o', required=True, type=click.Path(), help='Output PDF path')
@click.option('--owner-password', default=None, help='Owner password of the source')
@click.option('--user-password', default=None, help='User password of the source')
@click.option('--new-owner-password', default=None, help='Owner password for the output')
@click.option('--new-user-password', default=None, help='User password for the output')
@click.option(
    '--preserve/--no-preserve',
    default=True,
    show_default=True,
    help='Re-apply the source encryption to the output',
)
@click.option('--remove-security', is_flag=True, default=False, help='Write an unencrypted output')
def rewrite(input_pdf, output, owner_password, user_password, new_owner_password,
            new_user_password, preserve, remove_security):
    """
    Rewrite a PDF with neutral metadata.

    Examples:

        pdf-factory rewrite input.pdf -o clean.pdf

        pdf-factory rewrite locked.pdf -o open.pdf --owner-password secret --remove-security
    """
    console.print("\n[bold cyan]Rewriting PDF...[/bold cyan]")
    outcome = _engine().rewrite_existing(
        RewriteSpec(
            input_path=input_pdf,
            output_path=output,
            owner_password=owner_password,
            user_password=user_password,
            new_owner_password=new_owner_password,
            new_user_password=new_user_password,
            preserve_security=preserve,
            remove_security=remove_security,
        )
    )
    if outcome.success and outcome.original_security_info is not None:
        console.print(_profile_table("Source Security", outcome.original_security_info))
    _report(outcome, output)


@cli.command(name="secure")
@click.argument('input_pdf', type=click.Path(exists=True))
@click.option('--output', '-o', required=True, type=click.Path(), help='Output PDF path')
@click.option('--owner-password', required=True, help='Owner password for the output')
@click.option('--user-password', default=None, help='User password for the output')
@click.option(
    '--encryption', '-e',
    default="RC4_128",
    show_default=True,
    type=click.Choice(ENCRYPTION_CHOICES, case_sensitive=False),
    help='Encryption type',
)
@permission_options
def secure(input_pdf, output, owner_password, user_password, encryption, **flags):
    """
    Encrypt a PDF with new passwords and permissions.

    Example:

        pdf-factory secure input.pdf -o locked.pdf --owner-password secret --allow-printing Y
    """
    settings = SecuritySettings.from_flags(
        owner_password=owner_password,
        user_password=user_password,
        encryption_type=encryption,
        **flags,
    )
    console.print("\n[bold cyan]Applying security settings...[/bold cyan]")
    _report(_engine().apply_security(input_pdf, settings), output)


@cli.command(name="create")
@click.option('--output', '-o', required=True, type=click.Path(), help='Output PDF path')
@click.option('--title', '-t', default=None, help='Document title')
@click.option('--content', '-c', default=None, help='Document text; blank lines separate paragraphs')
@click.option(
    '--content-file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Read the document text from a file',
)
@click.option('--owner-password', required=True, help='Owner password for the output')
@click.option('--user-password', default=None, help='User password for the output')
@click.option(
    '--encryption', '-e',
    default="RC4_128",
    show_default=True,
    type=click.Choice(ENCRYPTION_CHOICES, case_sensitive=False),
    help='Encryption type',
)
@permission_options
def create(output, title, content, content_file, owner_password, user_password, encryption, **flags):
    """
    Create a new password-protected PDF from text.

    Example:

        pdf-factory create -o memo.pdf -t "Memo" -c "Hello" --owner-password secret
    """
    if content_file:
        with open(content_file, encoding="utf-8") as handle:
            content = handle.read()

    settings = SecuritySettings.from_flags(
        owner_password=owner_password,
        user_password=user_password,
        encryption_type=encryption,
        **flags,
    )
    console.print("\n[bold cyan]Creating secured PDF...[/bold cyan]")
    _report(_engine().create_secured(title, content, settings), output)


if __name__ == '__main__':
    cli()
