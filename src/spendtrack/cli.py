"""Flask CLI commands for SpendTrack."""

from __future__ import annotations

from pathlib import Path

import click
from flask import Flask


def init_app(app: Flask) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("spendtrack-init-db")
    def spendtrack_init_db() -> None:
        """Create any missing tables in the configured database."""

        from .extensions import get_engine
        from .infra.database import init_database

        engine = get_engine(app)
        init_database(engine)
        click.echo(f"Database ready: {engine.url.render_as_string(hide_password=True)}")

    @app.cli.command("spendtrack-export")
    @click.option("--email", required=True, help="Owner whose expenses are exported.")
    @click.option(
        "--output",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="CSV destination (defaults to <data dir>/exports/expenses.csv).",
    )
    def spendtrack_export(email: str, output: Path | None) -> None:
        """Export one user's expenses to CSV."""

        from .extensions import expense_repository, get_session_factory
        from .services.auth import get_user_by_email
        from .services.export_csv import export_expenses_csv

        with app.app_context():
            user = get_user_by_email(email, get_session_factory(app))
            if user is None:
                raise click.ClickException(f"No user registered with {email}")
            rows = expense_repository().search(user_id=user.id)
        target = output or app.config["SPENDTRACK_CONFIG"].DATA_DIR / "exports" / "expenses.csv"
        path = export_expenses_csv(rows=rows, output_path=target)
        click.echo(f"Exported {len(rows)} expenses to {path}")
