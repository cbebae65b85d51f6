"""srcmodel index command - build and print the project model."""

from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from srcmodel.config import SrcModelConfig, load_config
from srcmodel.core.errors import SrcModelError
from srcmodel.core.logging import configure_logging, get_log_file_path
from srcmodel.core.progress import pluralize, progress_bar, status
from srcmodel.index.export import dump_json, dump_yaml
from srcmodel.index.ops import IndexResult, index_project

_MAX_DIAGNOSTICS_SHOWN = 20


def _overrides(
    workers: int | None,
    single_pass: bool,
    policy: str | None,
    no_relations: bool,
    include_tests: bool | None,
) -> dict[str, Any]:
    """Translate CLI flags into load_config() keyword overrides."""
    indexer: dict[str, Any] = {}
    if workers is not None:
        indexer["max_workers"] = workers
    if single_pass:
        indexer["attach_mode"] = "single_pass"
    if policy is not None:
        indexer["duplicate_policy"] = policy
    if no_relations:
        indexer["detect_relations"] = False

    overrides: dict[str, Any] = {}
    if indexer:
        overrides["indexer"] = indexer
    if include_tests is not None:
        overrides["index"] = {"include_test_files": include_tests}
    return overrides


def _make_package_table(result: IndexResult) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("package", style="cyan")
    table.add_column("files", justify="right")
    table.add_column("types", justify="right")
    table.add_column("functions", justify="right")
    table.add_column("methods", justify="right")
    table.add_column("imports", justify="right")

    for pkg in sorted(result.model.iter_packages(), key=lambda p: p.name):
        methods = sum(len(t.methods) for t in pkg.types.values())
        imports = len(result.model.imports.get(pkg.name, []))
        table.add_row(
            pkg.name,
            str(len(pkg.files)),
            str(len(pkg.types)),
            str(len(pkg.functions)),
            str(methods),
            str(imports),
        )
    return table


def _print_summary(result: IndexResult, console: Console) -> None:
    stats = result.stats
    console.print(
        f"Indexed {pluralize(stats.files_indexed, 'file')} into "
        f"{pluralize(stats.packages, 'package')} "
        f"({stats.duration_seconds:.2f}s)",
        highlight=False,
    )
    console.print(_make_package_table(result))
    console.print(
        f"{pluralize(stats.types, 'type')}, {pluralize(stats.functions, 'function')}, "
        f"{pluralize(stats.methods, 'method')}, {pluralize(stats.relations, 'relation')}",
        highlight=False,
    )
    if stats.files_skipped:
        console.print(f"Skipped {pluralize(stats.files_skipped, 'file')}", highlight=False)

    if not result.diagnostics:
        return
    console.print(f"\n{pluralize(len(result.diagnostics), 'diagnostic')}:", highlight=False)
    for diag in result.diagnostics[:_MAX_DIAGNOSTICS_SHOWN]:
        console.print(f"  [yellow]{diag.kind.value}[/yellow] {diag.file_path}: {diag.message}", highlight=False)
    hidden = len(result.diagnostics) - _MAX_DIAGNOSTICS_SHOWN
    if hidden > 0:
        console.print(f"  ... and {hidden} more", highlight=False)


@click.command()
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["summary", "json", "yaml"]),
    default="summary",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write JSON/YAML to this file instead of stdout (summary format writes JSON)",
)
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Parallel extraction workers")
@click.option("--single-pass", is_flag=True, help="Attach methods as files arrive (order-dependent)")
@click.option(
    "--policy",
    type=click.Choice(["first_wins", "merge_fields"]),
    default=None,
    help="Duplicate type declaration policy",
)
@click.option("--no-relations", is_flag=True, help="Skip relation detection")
@click.option(
    "--include-tests/--exclude-tests",
    "include_tests",
    default=None,
    help="Index *_test.go files (default from config)",
)
@click.pass_context
def index_command(
    ctx: click.Context,
    path: Path,
    output_format: str,
    output: Path | None,
    workers: int | None,
    single_pass: bool,
    policy: str | None,
    no_relations: bool,
    include_tests: bool | None,
) -> None:
    """Index a Go source tree and print its structural model.

    PATH is the root directory to index (default: current directory).
    Per-file problems are reported as diagnostics; only a missing or
    unreadable root is fatal.
    """
    root = path.resolve()
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    try:
        config: SrcModelConfig = load_config(
            root if root.is_dir() else None,
            **_overrides(workers, single_pass, policy, no_relations, include_tests),
        )
        if not verbose:
            configure_logging(config=config.logging)

        if output_format == "summary":
            with progress_bar("Indexing") as on_progress:
                result = index_project(root, config, on_progress=on_progress)
        else:
            result = index_project(root, config)
    except SrcModelError as e:
        log_path = get_log_file_path()
        hint = f"\nSee log: {log_path}" if log_path else ""
        raise click.ClickException(f"{e}{hint}") from e
    except KeyboardInterrupt:
        status("Interrupted", style="warning")
        raise SystemExit(130) from None

    if output_format == "summary":
        _print_summary(result, Console(highlight=False))
        if output is not None:
            output.write_text(dump_json(result))
            status(f"Model written to {output}", style="success")
        return

    text = dump_json(result) if output_format == "json" else dump_yaml(result)
    if output is not None:
        output.write_text(text)
        status(f"Model written to {output}", style="success")
    else:
        click.echo(text)
