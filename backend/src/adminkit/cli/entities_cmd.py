"""Entity CLI commands - inspect and validate the registry."""

import json

import click

from adminkit.bootstrap import build_registry
from adminkit.registry import EntityRegistry


def _registry(ctx: click.Context) -> EntityRegistry:
    obj = ctx.find_object(dict) or {}
    if "registry" not in obj:
        obj["registry"] = build_registry(obj.get("metadata_path"))
    return obj["registry"]


def _dump(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
def entities():
    """Entity registry commands."""
    pass


@entities.command("list")
@click.pass_context
def list_entities(ctx: click.Context):
    """List registered entities."""
    registry = _registry(ctx)
    click.echo(f"{'NAME':<16} {'DISPLAY NAME':<20} {'FIELDS':>6}  HOOKS")
    for entity in registry.get_all_entities():
        hooks = ", ".join(entity.hooks.implemented_hooks()) or "-"
        click.echo(
            f"{entity.name:<16} {entity.display_name:<20} {len(entity.fields):>6}  {hooks}"
        )
    click.echo(f"\n{len(registry)} entities")


@entities.command()
@click.pass_context
def validate(ctx: click.Context):
    """Check every entity for missing system fields and stray tenant rules."""
    registry = _registry(ctx)
    problems = registry.validate_all()

    for name in registry.get_entity_names():
        errors = problems.get(name, [])
        if errors:
            click.echo(click.style(f"  ✗ {name}", fg="red"))
            for error in errors:
                click.echo(f"      {error}")
        else:
            click.echo(click.style(f"  ✓ {name}", fg="green"))

    if problems:
        count = sum(len(errors) for errors in problems.values())
        click.echo(click.style(f"\n{count} problem(s) found.", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(click.style("\nAll entities are valid.", fg="green"))


@entities.command()
@click.pass_context
def routes(ctx: click.Context):
    """Print admin route descriptors as JSON."""
    _dump(_registry(ctx).generate_admin_routes())


@entities.command()
@click.pass_context
def endpoints(ctx: click.Context):
    """Print REST endpoint descriptors as JSON."""
    _dump(_registry(ctx).generate_api_endpoints())


@entities.command()
@click.pass_context
def navigation(ctx: click.Context):
    """Print the navigation tree as JSON."""
    _dump(_registry(ctx).generate_navigation())


@entities.command()
@click.argument("name")
@click.pass_context
def form(ctx: click.Context, name: str):
    """Print the form config of one entity as JSON."""
    config = _registry(ctx).generate_form_config(name)
    if config is None:
        click.echo(f"Error: Entity '{name}' is not registered", err=True)
        raise SystemExit(1)
    _dump(config.to_dict())
