"""CLI for task-match."""

import asyncio
from dataclasses import asdict, replace
import json
import logging
from pathlib import Path

import click

from .errors import TaskMatchError
from .nlp.config import CLASSIFIER_KINDS, CLUSTER_STRATEGIES, DEFAULT_MATCH_CONFIG, load_config
from .nlp.processor import remove_extracted_terms
from .nlp.service import MatchService
from .nlp.synonyms import expand_with_synonyms
from .tasks import load_tasks, task_id, task_title


@click.group()
@click.option(
    "--classifier",
    type=click.Choice(CLASSIFIER_KINDS),
    default=None,
    help="Intent classifier variant (overrides the config file)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, classifier: str | None, config_path: Path | None, verbose: bool):
    """Task Match - similar task search and duplicate detection."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path) if config_path else DEFAULT_MATCH_CONFIG
    except TaskMatchError as exc:
        raise SystemExit(str(exc)) from exc

    overrides = {"classifier": classifier} if classifier else {}
    ctx.obj = {"config": config, "overrides": overrides}


def _service(ctx: click.Context) -> MatchService:
    config = replace(ctx.obj["config"], **ctx.obj["overrides"])
    try:
        return MatchService(config)
    except TaskMatchError as exc:
        raise SystemExit(str(exc)) from exc


def _report_profile(service: MatchService) -> None:
    if service.profiler.enabled:
        click.echo(service.profiler.format_summary(), err=True)


def _tasks(path: Path) -> list:
    try:
        return load_tasks(path)
    except TaskMatchError as exc:
        raise SystemExit(str(exc)) from exc


@cli.command()
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("title", type=str)
@click.option("--threshold", "-t", type=click.FloatRange(0.0, 1.0), default=None)
@click.option("--no-fuzzy", is_flag=True, help="Skip the edit-distance pass")
@click.option("--limit", "-n", type=int, default=10, help="Number of results")
@click.pass_context
def similar(
    ctx: click.Context,
    tasks_file: Path,
    title: str,
    threshold: float | None,
    no_fuzzy: bool,
    limit: int,
):
    """Find tasks similar to TITLE."""
    tasks = _tasks(tasks_file)
    service = _service(ctx)
    results = asyncio.run(
        service.find_similar_tasks(tasks, title, threshold=threshold, use_fuzzy=not no_fuzzy)
    )
    _report_profile(service)

    if not results:
        click.echo("No similar tasks found.")
        return

    click.echo(f"Found {len(results)} similar tasks:\n")
    for result in results[:limit]:
        click.echo(f"[{result.similarity:.3f}] #{result.id} {result.title}")


@cli.command()
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--min-similarity",
    type=click.IntRange(0, 100),
    default=None,
    help="Minimum similarity percentage for grouping",
)
@click.option("--limit", "-n", type=int, default=None, help="Maximum groups to show")
@click.option("--strategy", type=click.Choice(CLUSTER_STRATEGIES), default=None)
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_context
def dedupe(
    ctx: click.Context,
    tasks_file: Path,
    min_similarity: int | None,
    limit: int | None,
    strategy: str | None,
    as_json: bool,
):
    """Group likely duplicate tasks."""
    tasks = _tasks(tasks_file)
    service = _service(ctx)
    threshold = None if min_similarity is None else min_similarity / 100
    groups = asyncio.run(
        service.find_duplicate_groups(tasks, threshold=threshold, strategy=strategy)
    )
    _report_profile(service)
    groups.sort(key=lambda group: group.max_similarity, reverse=True)
    if limit is not None:
        groups = groups[:limit]

    if as_json:
        payload = [
            {
                "tasks": [{"id": task_id(task), "title": task_title(task)} for task in group.tasks],
                "max_similarity": group.max_similarity,
                "similarity_matrix": [list(row) for row in group.similarity_matrix],
            }
            for group in groups
        ]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not groups:
        click.echo("No duplicate groups found.")
        return

    click.echo(f"Found {len(groups)} duplicate groups:\n")
    for number, group in enumerate(groups, 1):
        click.echo(f"{number}. {len(group)} tasks, max similarity {group.max_similarity:.0%}")
        for task in group.tasks:
            click.echo(f"   #{task_id(task)} {task_title(task)}")
        click.echo()


@cli.command()
@click.argument("query", type=str)
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_context
def filters(ctx: click.Context, query: str, as_json: bool):
    """Extract structured search filters from QUERY."""
    service = _service(ctx)
    extracted = asyncio.run(service.extract_search_filters(query))
    remaining = remove_extracted_terms(query, extracted.extracted_terms)

    if as_json:
        payload = asdict(extracted)
        payload["remaining"] = remaining
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for name in ("status", "readiness", "priority"):
        value = getattr(extracted, name)
        if value:
            click.echo(f"{name}: {value}")
    if extracted.tags:
        click.echo(f"tags: {', '.join(extracted.tags)}")
    if extracted.action_types:
        click.echo(f"actions: {', '.join(extracted.action_types)}")
    click.echo(f"remaining: {remaining}")


@cli.command()
@click.argument("query", type=str)
def expand(query: str):
    """Expand QUERY terms with task vocabulary synonyms."""
    for term in expand_with_synonyms(query):
        click.echo(term)


if __name__ == "__main__":
    cli()
