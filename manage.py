import click
from flask import current_app
from flask.cli import FlaskGroup
from flask_migrate import Migrate

from certportal.app import create_app, db
from certportal.constants import MESSAGE_LIMIT_REACHED, MESSAGE_SUCCESS
from certportal.models import IssuanceStat
from certportal.services.issuance import issue_certificate
from certportal.shared.certificates import CertificateDeliveryError
from certportal.shared.fonts import FontBundle
from certportal.shared.issuance import (
    IssuanceLimitReached,
    client_storage_key,
    lookup_public_address,
    remaining_issues,
)
from certportal.shared.storage import save_certificate


migrate = Migrate()


def create_certportal_app():
    app = create_app()
    migrate.init_app(app, db)
    return app


cli = FlaskGroup(create_app=create_certportal_app)


@cli.command("issue_cert")
@click.option("--name", "name", required=True)
@click.option("--out", "out_dir", default=".", show_default=True)
@click.option("--impact", "impact", default=None, help="Skip generation and use this message")
@click.option(
    "--offline",
    is_flag=True,
    help="Skip the address lookup and font download (transliterated output)",
)
def issue_cert(name: str, out_dir: str, impact: str | None, offline: bool):
    """Issue a certificate for NAME and write the PDF into --out."""
    address = None
    if not offline:
        address = lookup_public_address(current_app.config["IP_LOOKUP_URL"])
    key = client_storage_key(address)
    try:
        certificate = issue_certificate(
            name,
            key,
            cap=current_app.config["ISSUANCE_CAP"],
            api_key=None if offline else current_app.config["GEMINI_API_KEY"],
            model=current_app.config["GEMINI_MODEL"],
            api_base=current_app.config["GEMINI_API_BASE"],
            impact_message=impact,
            fonts=FontBundle() if offline else None,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--name")
    except IssuanceLimitReached as exc:
        click.echo(MESSAGE_LIMIT_REACHED.format(cap=exc.cap), err=True)
        raise SystemExit(2)
    except CertificateDeliveryError as exc:
        click.echo(f"Certificate could not be produced: {exc}", err=True)
        raise SystemExit(1)
    path = save_certificate(certificate, out_dir)
    click.echo(MESSAGE_SUCCESS)
    click.echo(path)


@cli.command("show_stats")
@click.option("--key", "key", default=None, help="Only show this storage key")
def show_stats(key: str | None):
    """List issuance counters per client key."""
    cap = current_app.config["ISSUANCE_CAP"]
    query = db.session.query(IssuanceStat).order_by(IssuanceStat.storage_key)
    if key:
        query = query.filter(IssuanceStat.storage_key == key)
    rows = query.all()
    if not rows:
        click.echo("No issuance records")
        return
    for stat in rows:
        click.echo(
            f"{stat.storage_key} count={stat.count} "
            f"remaining={remaining_issues(stat.count, cap)} "
            f"last={stat.last_generated.isoformat() if stat.last_generated else '-'}"
        )


if __name__ == "__main__":
    cli()
