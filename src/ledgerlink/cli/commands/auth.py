"""Sign-up, sign-in and password commands."""

import click
from ledgerlink.config import clear_session_token, write_session_token
from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.errors import DomainError
from ledgerlink.cli.error_handling import handle_domain_error


@click.command("signup")
@click.option("--email", required=True, help="Email address")
@click.option("--name", "display_name", required=True, help="Display name (2-50 characters)")
@click.password_option(help="Password (6-100 characters)")
@click.pass_context
def signup(ctx, email: str, display_name: str, password: str):
    """Create an account and sign in.

    Examples:
        ledgerlink signup --email ana@example.com --name Ana
    """
    auth: AuthService = ctx.obj["auth"]
    try:
        session = auth.sign_up(email=email, password=password, display_name=display_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    write_session_token(ctx.obj["settings"], session.token)
    click.echo(f"Signed up and logged in as {session.email}")


@click.command("login")
@click.option("--email", required=True, help="Email address")
@click.option("--password", prompt=True, hide_input=True, help="Password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Sign in with email and password."""
    auth: AuthService = ctx.obj["auth"]
    try:
        session = auth.sign_in(email, password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    write_session_token(ctx.obj["settings"], session.token)
    click.echo(f"Logged in as {session.email}")


@click.command("logout")
@click.pass_context
def logout(ctx):
    """Sign out and forget the saved session."""
    auth: AuthService = ctx.obj["auth"]
    try:
        auth.sign_out()
    except DomainError as e:
        handle_domain_error(ctx, e)
    clear_session_token(ctx.obj["settings"])
    ctx.obj["ledger"].clear()
    click.echo("Logged out")


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the signed-in user."""
    auth: AuthService = ctx.obj["auth"]
    if not auth.is_authenticated:
        click.echo("Not logged in")
        return
    click.echo(f"{auth.session.email} (ID: {auth.current_user_id})")


@click.group()
def password_group():
    """Change or reset your password."""
    pass


@password_group.command("update")
@click.password_option("--new-password", help="New password")
@click.pass_context
def update_password(ctx, new_password: str):
    """Change the signed-in user's password."""
    auth: AuthService = ctx.obj["auth"]
    try:
        auth.update_password(new_password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Password updated")


@password_group.command("reset-request")
@click.option("--email", required=True, help="Email address of the account")
@click.pass_context
def request_reset(ctx, email: str):
    """Issue a one-hour password reset token."""
    auth: AuthService = ctx.obj["auth"]
    try:
        token = auth.request_password_reset(email)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("If an account exists for that email, a reset token has been issued.")
    if token is not None:
        # No mail delivery for the local store: print the token for the owner.
        click.echo(f"Reset token: {token}")


@password_group.command("reset")
@click.argument("token")
@click.password_option("--new-password", help="New password")
@click.pass_context
def reset_password(ctx, token: str, new_password: str):
    """Set a new password using a reset token."""
    auth: AuthService = ctx.obj["auth"]
    try:
        auth.reset_password(token, new_password)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Password has been reset. You can now log in.")


def register_commands(cli):
    """Register auth commands with main CLI."""
    cli.add_command(signup)
    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
    cli.add_command(password_group, name="password")
