"""Main CLI entry point."""

import logging

import click
from ledgerlink.config import load_settings, read_session_token, clear_session_token
from ledgerlink.database.factories import create_object_storage, create_sqlite_database
from ledgerlink.domain.account import AccountService
from ledgerlink.domain.auth import AuthService
from ledgerlink.domain.category import CategoryRegistry
from ledgerlink.domain.errors import DomainError
from ledgerlink.domain.ledger import LedgerStore
from ledgerlink.domain.reports import ReportService
from ledgerlink.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from ledgerlink.cli.commands import (
    auth,
    add,
    transaction,
    category,
    summary,
    report,
    profile,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERLINK_DB_PATH environment variable)",
    envvar="LEDGERLINK_DB_PATH",
)
@click.option(
    "--home",
    type=click.Path(),
    help="Directory for session, storage and key files (overrides LEDGERLINK_HOME)",
    envvar="LEDGERLINK_HOME",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, home: str | None, verbose: bool):
    """Ledgerlink - Personal income and expense ledger.

    Record incomes and expenses, link expenses to the incomes that fund them,
    and see how much of each income is left.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        settings = load_settings(home=home, db_path=db_path)
        db = create_sqlite_database(database_path=str(settings.db_path))
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)

        storage = create_object_storage(settings)
        auth_service = AuthService(db)
        token = read_session_token(settings)
        if token:
            try:
                restored = auth_service.restore(token)
            except DomainError as e:
                handle_domain_error(ctx, e)
            if restored is None:
                clear_session_token(settings)

        ledger = LedgerStore(db, auth_service)
        ctx.obj.update(
            settings=settings,
            db=db,
            storage=storage,
            auth=auth_service,
            ledger=ledger,
            categories=CategoryRegistry(db, auth_service),
            accounts=AccountService(db, storage, auth_service),
            reports=ReportService(ledger),
        )


# Register all commands
auth.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
category.register_commands(cli)
summary.register_commands(cli)
report.register_commands(cli)
profile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
