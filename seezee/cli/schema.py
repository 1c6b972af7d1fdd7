from __future__ import annotations

import alembic.command
import alembic.config

import seezee.lib.cli as click
from seezee.core import di

AlembicConfig = alembic.config.Config


@click.group("schema")
def schema():
    """Inspect and migrate the database schema."""
    ...


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def current(verbose: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    """Show the revision the database is at."""
    alembic.command.current(alembic_conf, verbose=verbose)


@schema.command()
@click.argument("message")
@click.option("--autogenerate/--empty", default=True, help="Diff the tables against the database")
@di.inject
def generate(
    message: str, autogenerate: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]
):
    """Create a new revision named MESSAGE."""
    alembic.command.revision(alembic_conf, message, autogenerate=autogenerate)


@schema.command()
@click.argument("revision", default="head")
@click.option("--sql", is_flag=True, default=False, help="Print the SQL instead of running it")
@di.inject
def up(revision: str, sql: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    """Upgrade to REVISION, the latest by default."""
    alembic.command.upgrade(alembic_conf, revision, sql=sql)


@schema.command()
@click.argument("revision", default="-1")
@click.option("--sql", is_flag=True, default=False, help="Print the SQL instead of running it")
@di.inject
def down(revision: str, sql: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    """Downgrade to REVISION, one step back by default."""
    alembic.command.downgrade(alembic_conf, revision, sql=sql)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def history(verbose: bool, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    alembic.command.history(alembic_conf, verbose=verbose, indicate_current=True)


@schema.command()
@click.argument("revision")
@di.inject
def stamp(revision: str, alembic_conf: AlembicConfig = di.Provide["storage.persistent.alembic_config"]):
    """Mark the database as being at REVISION without running migrations."""
    alembic.command.stamp(alembic_conf, revision)


command = schema
