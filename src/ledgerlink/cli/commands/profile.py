"""Profile and account commands."""

import mimetypes
from pathlib import Path

import click
from ledgerlink.config import clear_session_token
from ledgerlink.domain.account import AccountService
from ledgerlink.domain.errors import DomainError
from ledgerlink.cli.error_handling import handle_domain_error


@click.group()
def profile_group():
    """View and manage your profile and account."""
    pass


@profile_group.command("show")
@click.pass_context
def show_profile(ctx):
    """Show the signed-in user's profile."""
    accounts: AccountService = ctx.obj["accounts"]
    try:
        profile = accounts.get_profile()
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Name: {profile.display_name}")
    click.echo(f"Email: {ctx.obj['auth'].session.email}")
    click.echo(f"Avatar: {profile.avatar_path or '(none)'}")


@profile_group.command("rename")
@click.argument("display_name")
@click.pass_context
def rename(ctx, display_name: str):
    """Change your display name."""
    accounts: AccountService = ctx.obj["accounts"]
    try:
        profile = accounts.update_display_name(display_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Display name set to '{profile.display_name}'")


@profile_group.command("avatar")
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def upload_avatar(ctx, image: Path):
    """Upload an image file (max 5MB) as your avatar."""
    accounts: AccountService = ctx.obj["accounts"]
    content_type = mimetypes.guess_type(image.name)[0] or "application/octet-stream"
    try:
        profile = accounts.upload_avatar(image.name, image.read_bytes(), content_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Avatar uploaded to {profile.avatar_path}")


@profile_group.command("avatar-url")
@click.option("--expires-in", type=click.IntRange(min=1), default=3600, show_default=True, help="Seconds the URL stays valid")
@click.pass_context
def avatar_url(ctx, expires_in: int):
    """Print a time-limited URL for your avatar."""
    accounts: AccountService = ctx.obj["accounts"]
    try:
        url = accounts.avatar_url(expires_in=expires_in)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if url is None:
        click.echo("No avatar uploaded.")
        return
    click.echo(url)


@profile_group.command("delete-account")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, yes: bool):
    """Permanently delete your account and all of its data."""
    accounts: AccountService = ctx.obj["accounts"]
    if not yes and not click.confirm(
        "This deletes every transaction, category and file you own. Continue?"
    ):
        click.echo("Deletion cancelled.")
        return
    try:
        accounts.delete_account()
    except DomainError as e:
        handle_domain_error(ctx, e)
    clear_session_token(ctx.obj["settings"])
    click.echo("Account deleted.")


def register_commands(cli):
    """Register profile commands with main CLI."""
    cli.add_command(profile_group, name="profile")
