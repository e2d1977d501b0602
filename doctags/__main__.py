"""Entry point: doctags [check <path>... | serve]."""

import pathlib
import subprocess
import typing
from collections.abc import Iterable, Iterator

import typer

app = typer.Typer()

# Build output, IDE metadata and VCS internals never hold sources worth checking.
_SKIP_DIRS: frozenset[str] = frozenset(
    {".git", ".gradle", ".idea", "build", "node_modules", "out", "target"}
)

_GIT_CHANGED = ["git", "diff", "--name-only", "--relative", "--diff-filter=ACMR", "HEAD"]


def _expand(path: pathlib.Path) -> Iterator[pathlib.Path]:
    """Yield *path* itself, or every .java file below it when it is a directory."""
    if not path.is_dir():
        yield path
        return
    for java_file in sorted(path.rglob("*.java")):
        if _SKIP_DIRS.isdisjoint(java_file.relative_to(path).parts):
            yield java_file


def _changed_java_files() -> list[pathlib.Path]:
    """Return .java files git reports as changed against HEAD.

    Paths are relative to the working directory. Nothing is returned when
    git is missing or the working directory is not inside a repository.
    """
    try:
        proc = subprocess.run(  # noqa: S603
            _GIT_CHANGED, capture_output=True, text=True, check=False
        )
    except OSError:
        return []
    if proc.returncode != 0:
        return []
    return [
        pathlib.Path(name)
        for name in proc.stdout.splitlines()
        if name.endswith(".java")
    ]


def _java_files(
    paths: Iterable[pathlib.Path], *, diff: bool
) -> list[pathlib.Path]:
    """Collect the files to check, each physical file once, first spelling wins."""
    wanted = list(_changed_java_files()) if diff else []
    for path in paths:
        wanted.extend(_expand(path))
    by_target: dict[pathlib.Path, pathlib.Path] = {}
    for java_file in wanted:
        by_target.setdefault(java_file.resolve(), java_file)
    return list(by_target.values())


@app.command(no_args_is_help=True)
def check(
    paths: typing.Annotated[
        list[pathlib.Path] | None,
        typer.Argument(help="Java files or directories to check."),
    ] = None,
    diff: typing.Annotated[  # noqa: FBT002
        bool,
        typer.Option("--diff", help="Also check .java files changed since HEAD."),
    ] = False,
) -> None:
    """Report type comments with missing or malformed tags.

    Raises:
        typer.Exit: With code 1 if any file produced a diagnostic.
    """
    from doctags import analyzer as doctags_analyzer  # noqa: PLC0415
    from doctags import config as doctags_config  # noqa: PLC0415
    from doctags import rules  # noqa: PLC0415

    cfg = doctags_config.load_config()
    analyzer = doctags_analyzer.Analyzer(
        rules=doctags_config.active_rules(rules.ALL_RULES, cfg)
    )
    flagged = 0
    for java_file in _java_files(paths or [], diff=diff):
        try:
            text = java_file.read_text()
        except OSError as e:
            typer.echo(f"error: {e}", err=True)
            continue
        diagnostics = analyzer.analyze(text)
        flagged += bool(diagnostics)
        for diag in diagnostics:
            typer.echo(
                f"{java_file}:{diag.line}:{diag.col}: {diag.rule_id} {diag.message}"
            )
    if flagged:
        raise typer.Exit(code=1)


@app.command()
def serve() -> None:
    """Run the LSP server over stdio."""
    from doctags import server  # noqa: PLC0415

    server.start()


def main() -> None:
    """Dispatch to CLI check mode or LSP server mode."""
    app()


if __name__ == "__main__":
    main()
