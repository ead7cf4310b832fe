"""CLI main entry point."""

import json
import logging
from pathlib import Path

import click
import tomlkit

from .builder import FieldDescriptor, export_json, version_aggregate
from .config import Config
from .consts import CONFIG_FILE_DEFAULT
from .db import close_db, create_tables, init_db
from .enums import FieldKind
from .errors import FormforgeException
from .log import setup as setup_log
from .registry import DefinitionRegistry
from .store import ConfigVersionStore
from .utils import format_datetime

logger = logging.getLogger(__name__)


def load_config(config_path: str) -> Config:
    """Load configuration, falling back to defaults when the file is absent."""
    if Path(config_path).is_file():
        return Config.load_from_file(config_path)
    return Config()


def initialize_components(cfg: Config):
    """Open the database and build the registry and store."""
    init_db(cfg.database.path)
    create_tables()

    registry = DefinitionRegistry()
    store = ConfigVersionStore.from_config(cfg, registry)
    return registry, store


def starter_config() -> str:
    doc = tomlkit.document()
    doc.add(tomlkit.comment("formforge configuration"))
    doc.add("timezone", "UTC")
    doc["timezone"].comment("IANA timezone used when formatting timestamps")

    database = tomlkit.table()
    database.add("path", Config().database.path)
    database["path"].comment("SQLite database file")
    doc.add("database", database)

    web = tomlkit.table()
    web.add("host", "127.0.0.1")
    web.add("port", 8000)
    doc.add("web", web)

    store = tomlkit.table()
    store.add("max_version_retries", Config().store.max_version_retries)
    store["max_version_retries"].comment("Attempts when concurrent saves race")
    doc.add("store", store)

    export = tomlkit.table()
    export.add("indent", Config().export.indent)
    doc.add("export", export)

    return tomlkit.dumps(doc)


def _run(ctx, action):
    cfg = ctx.obj["config"]
    try:
        registry, store = initialize_components(cfg)
        return action(registry, store)
    except FormforgeException as e:
        logger.debug(f"Command failed: {e}")
        raise click.ClickException(str(e))
    finally:
        close_db()


@click.group()
@click.option("--config", "-c", default=CONFIG_FILE_DEFAULT, help="Configuration file path")
@click.pass_context
def cli(ctx, config: str):
    """formforge - versioned form configuration builder."""
    ctx.ensure_object(dict)
    try:
        cfg = load_config(config)
    except FormforgeException as e:
        raise click.ClickException(str(e))
    ctx.obj["config"] = cfg
    setup_log(cfg.log.file, cfg.log.level)


@cli.command(name="init-config")
@click.argument("path", default=CONFIG_FILE_DEFAULT)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(path: str, force: bool):
    """Write a starter configuration file."""
    target = Path(path)
    if target.exists() and not force:
        raise click.ClickException(f"Configuration file already exists: {path}")
    target.write_text(starter_config(), encoding="utf-8")
    click.echo(f"Configuration written to {path}")


@cli.group()
def brand():
    """Manage brands."""


@brand.command(name="create")
@click.argument("name")
@click.option("--description", default=None)
@click.pass_context
def brand_create(ctx, name, description):
    created = _run(ctx, lambda registry, store: registry.create_brand(name, description))
    click.echo(f"{created.id}\t{created.name}")


@brand.command(name="list")
@click.pass_context
def brand_list(ctx):
    brands = _run(ctx, lambda registry, store: registry.list_brands())
    click.echo("id\tname")
    for b in brands:
        click.echo(f"{b.id}\t{b.name}")


@cli.group(name="config")
def config_group():
    """Manage configuration definitions and their versions."""


@config_group.command(name="create")
@click.argument("brand_id", type=int)
@click.argument("name")
@click.option("--description", default=None)
@click.pass_context
def config_create(ctx, brand_id, name, description):
    definition = _run(
        ctx, lambda registry, store: registry.create_definition(brand_id, name, description)
    )
    click.echo(f"{definition.id}\t{definition.name}\tv{definition.current_version}")


@config_group.command(name="list")
@click.argument("brand_id", type=int)
@click.pass_context
def config_list(ctx, brand_id):
    definitions = _run(ctx, lambda registry, store: registry.list_definitions(brand_id))
    click.echo("id\tname\tlatest\tactive\tdescription")
    for d in definitions:
        click.echo(
            f"{d.id}\t{d.name}\t{d.current_version}\t{d.active_version or ''}\t{d.description or ''}"
        )


@config_group.command(name="rename")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.argument("new_name")
@click.pass_context
def config_rename(ctx, brand_id, definition_id, new_name):
    definition = _run(
        ctx,
        lambda registry, store: registry.rename_definition(brand_id, definition_id, new_name),
    )
    click.echo(f"Renamed to {definition.name}")


@config_group.command(name="delete")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.confirmation_option(prompt="Delete this configuration and all its versions?")
@click.pass_context
def config_delete(ctx, brand_id, definition_id):
    _run(ctx, lambda registry, store: registry.delete_definition(brand_id, definition_id))
    click.echo("Deleted")


@config_group.command(name="versions")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.pass_context
def config_versions(ctx, brand_id, definition_id):
    def action(registry, store):
        definition = registry.get_definition(brand_id, definition_id)
        return definition.active_version, store.list_versions(brand_id, definition_id)

    active, versions = _run(ctx, action)
    timezone = ctx.obj["config"].get_timezone()
    click.echo("version\tactive\tcreated_at")
    for v in versions:
        marker = "*" if v.version == active else ""
        click.echo(f"{v.version}\t{marker}\t{format_datetime(v.created_at, timezone)}")


@config_group.command(name="activate")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.argument("version", type=int)
@click.pass_context
def config_activate(ctx, brand_id, definition_id, version):
    _run(
        ctx,
        lambda registry, store: store.set_active_version(brand_id, definition_id, version),
    )
    click.echo(f"Active version set to {version}")


@config_group.command(name="export")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.option("--version", "version", type=int, default=None, help="Version to export (default: active)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None)
@click.pass_context
def config_export(ctx, brand_id, definition_id, version, output):
    """Export a configuration as a single JSON document."""
    indent = ctx.obj["config"].export.indent

    def action(registry, store):
        definition = registry.get_definition(brand_id, definition_id)
        if version is None:
            snapshot = store.active(brand_id, definition_id)
        else:
            snapshot = store.get_version(brand_id, definition_id, version)
        return export_json(definition.name, version_aggregate(snapshot), indent=indent)

    body = _run(ctx, action)
    if output:
        Path(output).write_text(body, encoding="utf-8")
        click.echo(f"Exported to {output}")
    else:
        click.echo(body)


@cli.group()
def field():
    """Edit fields; every edit is saved as a new version."""


def _field_options(func):
    options = [
        click.option("--name", "name", required=True),
        click.option(
            "--type",
            "kind",
            type=click.Choice([k.value for k in FieldKind]),
            default=FieldKind.TEXT.value,
        ),
        click.option("--label", default=None),
        click.option("--options", "options", default=None, help="Comma separated choices"),
        click.option("--required/--optional", default=False),
        click.option("--min", "minimum", type=float, default=None),
        click.option("--max", "maximum", type=float, default=None),
        click.option("--max-length", type=int, default=None),
        click.option("--pattern", default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _descriptor(name, kind, label, options, required, minimum, maximum, max_length, pattern):
    return FieldDescriptor(
        name=name,
        kind=FieldKind(kind),
        label=label,
        options=options,
        required=required,
        min=minimum,
        max=maximum,
        max_length=max_length,
        pattern=pattern,
    )


@field.command(name="add")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@_field_options
@click.pass_context
def field_add(ctx, brand_id, definition_id, **kwargs):
    descriptor = _descriptor(**kwargs)
    version = _run(
        ctx, lambda registry, store: store.add_field(brand_id, definition_id, descriptor)
    )
    click.echo(f'Field "{descriptor.name}" added, saved as version {version.version}')


@field.command(name="edit")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.argument("field_name")
@_field_options
@click.pass_context
def field_edit(ctx, brand_id, definition_id, field_name, **kwargs):
    descriptor = _descriptor(**kwargs)
    version = _run(
        ctx,
        lambda registry, store: store.update_field(
            brand_id, definition_id, field_name, descriptor
        ),
    )
    click.echo(f'Field "{descriptor.name}" updated, saved as version {version.version}')


@field.command(name="delete")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.argument("field_name")
@click.pass_context
def field_delete(ctx, brand_id, definition_id, field_name):
    version = _run(
        ctx, lambda registry, store: store.delete_field(brand_id, definition_id, field_name)
    )
    click.echo(f'Field "{field_name}" deleted, saved as version {version.version}')


@field.command(name="list")
@click.argument("brand_id", type=int)
@click.argument("definition_id", type=int)
@click.pass_context
def field_list(ctx, brand_id, definition_id):
    fields = _run(
        ctx, lambda registry, store: registry.field_descriptors(brand_id, definition_id)
    )
    for f in fields:
        click.echo(json.dumps(f.model_dump(mode="json", by_alias=True, exclude_none=True)))


@cli.command(name="serve")
@click.option("--host", "-h", default=None, help="Override host from config")
@click.option("--port", "-p", default=None, type=int, help="Override port from config")
@click.pass_context
def serve(ctx, host, port):
    """Start the API server."""
    import uvicorn

    from .api import create_app

    cfg = ctx.obj["config"]
    host = host or cfg.web.host
    port = port or cfg.web.port

    try:
        app = create_app(cfg)
    except FormforgeException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))

    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
