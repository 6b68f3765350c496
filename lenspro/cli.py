from decimal import Decimal

import click
from flask.cli import with_appcontext

from lenspro.authz import Role
from lenspro.errors import AppError
from lenspro.extensions import db
from lenspro.models import Equipment

SAMPLE_CATALOG = [
    ("Canon EOS R5", "45MP full-frame mirrorless body", "1500", "2500"),
    ("Sony A7 IV", "33MP full-frame mirrorless body", "1200", "2000"),
    ("Canon RF 24-70mm f/2.8L", "Standard zoom lens", "600", "1000"),
    ("Godox AD600 Pro", "Portable 600Ws strobe", "500", "800"),
    ("DJI RS 3 Pro", "Three-axis gimbal stabiliser", "700", "1100"),
]


@click.command("create-admin")
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.password_option()
@with_appcontext
def create_admin_command(name, email, password):
    """Create an admin account with its profile."""
    from lenspro.services import AuthService

    try:
        user = AuthService.register_user(name=name, email=email, password=password, role=Role.ADMIN)
    except AppError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"Admin {user.email} created (id {user.id}).")


@click.command("seed-catalog")
@with_appcontext
def seed_catalog_command():
    """Add a handful of sample camera equipment when the catalog is empty."""
    if Equipment.query.count():
        click.echo("Catalog already has equipment; nothing to do.")
        return
    for name, description, rate_12hr, rate_24hr in SAMPLE_CATALOG:
        db.session.add(
            Equipment(
                name=name,
                description=description,
                rate_12hr=Decimal(rate_12hr),
                rate_24hr=Decimal(rate_24hr),
                available=True,
            )
        )
    db.session.commit()
    click.echo(f"Seeded {len(SAMPLE_CATALOG)} equipment items.")


def register_cli(app):
    app.cli.add_command(create_admin_command)
    app.cli.add_command(seed_catalog_command)
