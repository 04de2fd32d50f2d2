from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich import print

from .config import DEFAULT_ALLOWED_COMMANDS, Config
from .errors import PreconditionError
from .models import RunContext
from .patches import discover_patches
from .restore import restore
from .runner import run_patch_replay
from .util import list_run_records, setup_logging
from .vcs.gateway import GitGateway

app = typer.Typer(help="Stage a batch of patch files on a throwaway branch, then replay them for review.")


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
        case_sensitive=False,
    ),
) -> None:
    try:
        setup_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level")


@app.command("run")
def cli_run(
    target: str = typer.Option(Config.target_branch, help="Branch the patches are merged into"),
    temp_branch: str = typer.Option(Config.temp_branch, help="Throwaway branch used for staging"),
    patch_dir: str = typer.Option(Config.patch_dir, help="Directory holding the patch files"),
    suffix: str = typer.Option(Config.patch_suffix, help="File suffix of patch files"),
    repo: Optional[Path] = typer.Option(None, help="Repository root (defaults to cwd)"),
    three_way: bool = typer.Option(
        True,
        "--three-way/--no-three-way",
        help="Fall back to a three-way merge when a patch does not apply cleanly",
    ),
    max_continue_attempts: int = typer.Option(
        Config.max_continue_attempts,
        min=1,
        help="Failed 'continue' attempts allowed per patch before the run aborts",
    ),
    unrestricted_commands: bool = typer.Option(
        False,
        "--unrestricted-commands",
        help="Let the review prompt run any git subcommand, not just "
        + ", ".join(sorted(DEFAULT_ALLOWED_COMMANDS)),
    ),
    record_dir: Optional[Path] = typer.Option(None, help="Write a JSON record of the run here"),
) -> None:
    config = Config(
        repo_root=(repo or Path.cwd()).resolve(),
        target_branch=target,
        temp_branch=temp_branch,
        patch_dir=patch_dir,
        patch_suffix=suffix,
        three_way=three_way,
        max_continue_attempts=max_continue_attempts,
        allowed_commands=None if unrestricted_commands else DEFAULT_ALLOWED_COMMANDS,
        record_dir=record_dir,
    )
    report = run_patch_replay(config)
    if report.record_path is not None:
        print(f"Run record written to {report.record_path}")
    raise typer.Exit(code=report.exit_code)


@app.command("list-patches")
def cli_list_patches(
    patch_dir: str = typer.Option(Config.patch_dir, help="Directory holding the patch files"),
    suffix: str = typer.Option(Config.patch_suffix, help="File suffix of patch files"),
    repo: Optional[Path] = typer.Option(None, help="Repository root (defaults to cwd)"),
) -> None:
    config = Config(repo_root=(repo or Path.cwd()).resolve(), patch_dir=patch_dir, patch_suffix=suffix)
    try:
        patches = discover_patches(config.resolved_patch_dir(), config.patch_suffix)
    except PreconditionError as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)
    for patch in patches:
        print(f"{patch.position:>3}  {patch.name}")
    print(f"{len(patches)} patch file(s) would be applied in this order.")


@app.command("cleanup")
def cli_cleanup(
    target: str = typer.Option(Config.target_branch, help="Branch to return to"),
    temp_branch: str = typer.Option(Config.temp_branch, help="Temporary branch to delete"),
    repo: Optional[Path] = typer.Option(None, help="Repository root (defaults to cwd)"),
) -> None:
    repo_root = (repo or Path.cwd()).resolve()
    ctx = RunContext(
        repo_root=repo_root,
        original_branch=target,
        target_branch=target,
        temp_branch=temp_branch,
        temp_branch_created=True,
    )
    result = restore(ctx, GitGateway(repo_root))
    if not result.ok:
        for problem in result.problems:
            print(f"[red]{problem}[/red]")
        raise typer.Exit(code=1)
    print(f"Back on {target}; {temp_branch} removed.")


@app.command("history")
def cli_history(
    record_dir: Path = typer.Option(..., help="Directory passed as --record-dir to earlier runs"),
) -> None:
    records = list_run_records(record_dir)
    if not records:
        print(f"No run records in {record_dir}")
        return
    for path in records:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            print(f"[yellow]{path.name}: unreadable[/yellow]")
            continue
        outcome = payload.get("outcome", {})
        print(
            f"{payload.get('started_at', '?')}  {outcome.get('kind', '?'):<20}"
            f"  applied={len(payload.get('applied', []))}"
            f"  skipped={len(payload.get('skipped', []))}"
            f"  replayed={len(payload.get('replayed', []))}"
        )


if __name__ == "__main__":
    app()
