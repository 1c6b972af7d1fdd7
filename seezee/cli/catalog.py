"""CLI commands for the assignable catalog: learning resources, tools, tasks and tool onboarding."""

from __future__ import annotations

import datetime

from sqlalchemy.orm import Session

import seezee.lib.cli as click
from seezee import assignment
from seezee.assignment import catalog as item_catalog
from seezee.core import di
from seezee.model import ItemKind, ItemSummary, parse_item_id, ResourceType, TaskPriority, ToolID
from seezee.storage import resource as resource_storage
from seezee.storage import task as task_storage
from seezee.storage import tool as tool_storage

ItemIDParamType = click.KeyParamType(parse_item_id, "item")


def _echo_item(s: ItemSummary) -> None:
    click.echo(f"{str(s.item_id):<36} {s.kind.value:<10} {s.title}")


@click.group("catalog")
def catalog():
    """Manage learning resources, tools and tasks."""
    ...


@catalog.command("add-resource")
@click.argument("title")
@click.argument("url")
@click.option("--type", "-t", "type_", type=click.EnumType(ResourceType), default=ResourceType.Other.value)
@click.option("--category", "-c", default=None)
@click.option("--description", "-d", default=None)
@click.option("--tag", "tags", multiple=True, help="May be given more than once")
@di.inject
def add_resource(
    title: str,
    url: str,
    type_: ResourceType,
    category: str | None,
    description: str | None,
    tags: tuple[str, ...],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Add a learning resource."""
    with session.begin():
        resource = resource_storage.create(
            title=title, type=type_, url=url, category=category, description=description, tags=tags, session=session
        )
    click.echo(f"Created resource: {resource.title}")
    click.echo(f"  ID: {resource.resource_id}")
    if resource.tags:
        click.echo(f"  Tags: {', '.join(resource.tags)}")


@catalog.command("add-tool")
@click.argument("name")
@click.argument("url")
@click.option("--category", "-c", required=True)
@click.option("--pricing", "-p", default=None)
@click.option("--description", "-d", default=None)
@click.option("--tag", "tags", multiple=True, help="May be given more than once")
@di.inject
def add_tool(
    name: str,
    url: str,
    category: str,
    pricing: str | None,
    description: str | None,
    tags: tuple[str, ...],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Add a tool."""
    with session.begin():
        tool = tool_storage.create(
            name=name, category=category, url=url, pricing=pricing, description=description, tags=tags, session=session
        )
    click.echo(f"Created tool: {tool.name}")
    click.echo(f"  ID: {tool.tool_id}")


@catalog.command("add-task")
@click.argument("title")
@click.option("--description", "-d", default="")
@click.option("--priority", "-p", type=click.EnumType(TaskPriority), default=TaskPriority.Medium.value)
@click.option("--due", "due_date", type=click.UTCDateTime(), default=None, help="Due date, read as UTC")
@di.inject
def add_task(
    title: str,
    description: str,
    priority: TaskPriority,
    due_date: datetime.datetime | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Add a task."""
    with session.begin():
        task = task_storage.create(
            title=title, description=description, priority=priority, due_date=due_date, session=session
        )
    click.echo(f"Created task: {task.title}")
    click.echo(f"  ID: {task.task_id}")
    click.echo(f"  Priority: {task.priority.value}")


@catalog.command("list")
@click.option("--kind", "-k", type=click.EnumType(ItemKind), default=None, help="Only list one kind of item")
@click.option("--search", "-s", default=None, help="Match title, name or description; tasks are left out")
@di.inject
def catalog_list(
    kind: ItemKind | None,
    search: str | None,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """List catalog items."""
    summaries: list[ItemSummary] = []
    with session.begin():
        if kind in (None, ItemKind.Resource):
            summaries.extend(ItemSummary.of(r) for r in resource_storage.find(search=search, session=session))
        if kind in (None, ItemKind.Tool):
            summaries.extend(ItemSummary.of(r) for r in tool_storage.find(search=search, session=session))
        if kind in (None, ItemKind.Task) and not search:
            summaries.extend(ItemSummary.of(r) for r in task_storage.find(session=session))

    if not summaries:
        click.echo("No items found.")
        return

    click.echo(f"{'ID':<36} {'Kind':<10} Title")
    click.echo("-" * 80)
    for s in summaries:
        _echo_item(s)


@catalog.command("remove")
@click.argument("item_id", type=ItemIDParamType)
@di.inject
def catalog_remove(
    item_id: str,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Delete an item along with its assignments and their completions."""
    with session.begin():
        deleted = item_catalog.delete_item(item_id, session=session)
    if not deleted:
        click.echo(f"Error: Item '{item_id}' not found.", err=True)
        raise SystemExit(1)
    click.echo(f"Removed {item_id}")


@catalog.command("onboard")
@click.argument("tool_id", type=click.KeyParamType(ToolID, "tool"))
@click.argument("title")
@click.option(
    "--step",
    "steps",
    multiple=True,
    required=True,
    help="A resource ID, in order; append :optional for a step that may be skipped",
)
@click.option("--description", "-d", default=None)
def catalog_onboard(tool_id: ToolID, title: str, steps: tuple[str, ...], description: str | None) -> None:
    """Give TOOL_ID an onboarding path of learning resources."""
    specs = []
    for position, step in enumerate(steps):
        resource_id, _, flag = step.partition(":")
        if flag not in ("", "optional"):
            raise click.BadParameter(f"{step}: unknown step flag {flag!r}", param_hint="--step")
        specs.append({"resource_id": resource_id.strip(), "position": position, "required": not flag})

    path = assignment.create_onboarding_path(tool_id, title, specs, description)
    click.echo(f"Created onboarding path: {path.title}")
    click.echo(f"  ID: {path.onboarding_path_id}")
    for step in path.steps:
        click.echo(f"  {step.position + 1}. {step.title}{'' if step.required else ' (optional)'}")


@catalog.command("onboarding")
def catalog_onboarding() -> None:
    """List tools with their onboarding paths."""
    for entry in assignment.tools_with_onboarding():
        click.echo(f"{entry.tool.name} ({entry.tool.tool_id})")
        if entry.path is None:
            click.echo("  No onboarding path.")
            continue
        click.echo(f"  {entry.path.title}: {len(entry.path.required_steps)} of {len(entry.path.steps)} step(s) required")
        for step in entry.path.steps:
            click.echo(f"  {step.position + 1}. {step.title} [{step.type.value}]{'' if step.required else ' (optional)'}")


command = catalog
