# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_sandman

from pathlib import Path
from typing import Annotated

import typer

from coreason_sandman.config import SandmanConfig
from coreason_sandman.exceptions import ExternalToolError, SandmanError
from coreason_sandman.models import MixPlan
from coreason_sandman.sandman import Sandman
from coreason_sandman.utils.logger import configure_logging

app = typer.Typer(
    help="Manage shared cabal sandboxes and mix them into projects.",
    no_args_is_help=True,
    add_completion=False,
)

NameArgument = Annotated[str, typer.Argument(metavar="NAME", help="Name of the sandman sandbox")]
DryRunOption = Annotated[bool, typer.Option("--dry-run", help="Show the plan without changing anything")]


def _sandman(ctx: typer.Context) -> Sandman:
    sandman: Sandman = ctx.obj
    return sandman


def _exit_status(returncode: int) -> int:
    """Shell-style status for a child exit code.

    A child killed by signal N reports -N; shells report that as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode or 1


def _fail(error: SandmanError) -> typer.Exit:
    typer.echo(str(error), err=True)
    if isinstance(error, ExternalToolError):
        return typer.Exit(code=_exit_status(error.exit_code))
    return typer.Exit(code=1)


def _print_plan(plan: MixPlan) -> None:
    for package in plan.packages:
        typer.echo(package.identity)


@app.callback()
def main_callback(
    ctx: typer.Context,
    home: Annotated[
        Path | None, typer.Option("--home", help="Sandman directory (default: ~/.sandman)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    # A pre-built Sandman (passed as ``obj``) takes precedence.
    if isinstance(ctx.obj, Sandman):
        config = ctx.obj.config
    else:
        overrides = {"home": home} if home is not None else {}
        config = SandmanConfig(**overrides)
        ctx.obj = Sandman(config)
    configure_logging("DEBUG" if verbose else config.log_level, config.log_file)


@app.command("list")
def list_command(
    ctx: typer.Context,
    name: Annotated[
        str | None,
        typer.Argument(
            metavar="[NAME]",
            help="If given, list packages installed in the specified sandbox, otherwise list all sandman sandboxes",
        ),
    ] = None,
) -> None:
    """List sandman sandboxes or the packages in them."""
    sandman = _sandman(ctx)
    try:
        if name is None:
            summaries = sandman.sandbox_summaries()
            if not summaries:
                typer.echo("No sandboxes created.")
            for summary in summaries:
                if summary.error is not None:
                    typer.echo(f"{summary.name} (ERROR: could not read package DB)")
                else:
                    typer.echo(f"{summary.name} ({summary.package_count} packages)")
            return

        identities = sandman.list_packages(name)
    except SandmanError as e:
        raise _fail(e) from e

    if not identities:
        typer.echo(f"{name} does not contain any packages.")
        return
    for identity in identities:
        typer.echo(identity)


@app.command("new")
def new_command(ctx: typer.Context, name: NameArgument) -> None:
    """Create a new sandman sandbox."""
    try:
        _sandman(ctx).create_sandbox(name)
    except SandmanError as e:
        raise _fail(e) from e
    typer.echo(f"Created sandbox {name}.")


@app.command("destroy")
def destroy_command(ctx: typer.Context, name: NameArgument) -> None:
    """Delete a sandman sandbox."""
    try:
        _sandman(ctx).destroy_sandbox(name)
    except SandmanError as e:
        raise _fail(e) from e
    typer.echo(f"Removed sandbox {name}.")


@app.command("install")
def install_command(
    ctx: typer.Context,
    name: NameArgument,
    packages: Annotated[list[str], typer.Argument(metavar="PACKAGES...", help="Packages to install")],
) -> None:
    """Install packages into a sandman sandbox."""
    try:
        _sandman(ctx).install_packages(name, packages)
    except SandmanError as e:
        raise _fail(e) from e


@app.command("mix")
def mix_command(ctx: typer.Context, name: NameArgument, dry_run: DryRunOption = False) -> None:
    """Mix a sandman sandbox into the current project."""
    sandman = _sandman(ctx)
    project_root = Path.cwd()
    try:
        plan = sandman.plan_mix(name, project_root)
        if plan.is_empty:
            typer.echo("No packages to mix in.")
            return

        typer.echo(f"Mixing {len(plan)} new packages into package DB at {plan.target_root}")
        if dry_run:
            _print_plan(plan)
            return
        sandman.apply(plan, project_root)
    except SandmanError as e:
        raise _fail(e) from e


@app.command("clean")
def clean_command(ctx: typer.Context, dry_run: DryRunOption = False) -> None:
    """Remove all mixed sandboxes from the current project."""
    sandman = _sandman(ctx)
    project_root = Path.cwd()
    try:
        plan = sandman.plan_clean(project_root)
        typer.echo("Removing all mixed sandboxes.")
        if plan.is_empty:
            typer.echo("No packages to remove.")
            return

        if dry_run:
            _print_plan(plan)
            return
        report = sandman.apply(plan, project_root)
    except SandmanError as e:
        raise _fail(e) from e

    typer.echo(f"Removed {len(report.processed)} packages.")


def main() -> None:
    """Entry point for the sandman CLI."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
