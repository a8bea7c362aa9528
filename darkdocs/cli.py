"""Cyclopts CLI entrypoint for building API documentation and the manual.

The ``darkdocs`` console script reads ``darkdocs.yaml`` and runs one or both
pipelines. ``darkdocs api`` renders pages from the extracted entity feed,
``darkdocs manual`` renders the ``.page`` sources, and ``darkdocs build``
runs both so the manual can link into freshly generated API pages. Every
option can also be supplied through a ``DARKDOCS_`` environment variable.

Examples
--------
Build everything described by the default configuration:

>>> from darkdocs.cli import main
>>> main()  # doctest: +SKIP

Preview the manual build without writing anything:

>>> from darkdocs.cli import app
>>> app(["manual", "--dry-run"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .catalog import load_catalog
from .config import SiteConfig, load_site_config
from .diagnostics import Diagnostics
from .generator import ApiDocGenerator, ManualGenerator, load_api_index

if typ.TYPE_CHECKING:
    from .index import EntityIndex

DEFAULT_CONFIG = Path("darkdocs.yaml")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

log = logging.getLogger("darkdocs")

app = App(name="darkdocs", config=cyclopts.config.Env("DARKDOCS_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[Path, Parameter(help="Path to darkdocs.yaml")]
OutputOption = typ.Annotated[
    Path | None, Parameter(help="Override the output folder")
]
DryRunOption = typ.Annotated[
    bool, Parameter(help="Log intended writes without touching the filesystem")
]
StrictOption = typ.Annotated[
    bool, Parameter(help="Exit with status 1 when any warning was recorded")
]
VerboseOption = typ.Annotated[bool, Parameter(help="Log progress at INFO level")]
DebugOption = typ.Annotated[bool, Parameter(help="Log per-entity detail")]


def configure_logging(*, verbose: bool = False, debug: bool = False) -> None:
    """Send darkdocs log records to stderr at the requested verbosity."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    log.setLevel(level)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _report(written: list[Path], diagnostics: Diagnostics, *, dry_run: bool, strict: bool) -> None:
    verb = "would write" if dry_run else "wrote"
    for path in written:
        print(f"{verb} {_format_path(path)}")
    if not diagnostics:
        return
    summary = ", ".join(f"{kind}: {count}" for kind, count in sorted(diagnostics.counts().items()))
    log.warning("%d problem(s) recorded (%s)", len(diagnostics), summary)
    if strict:
        raise SystemExit(1)


def _load_index(site: SiteConfig) -> EntityIndex | None:
    if site.api is None:
        return None
    return load_api_index(site.api)


@app.command(help="Render API documentation from the entity feed.")
def api(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: OutputOption = None,
    dry_run: DryRunOption = False,
    strict: StrictOption = False,
    verbose: VerboseOption = False,
    debug: DebugOption = False,
) -> None:
    """Generate API pages for the ``api`` section of the configuration.

    Parameters
    ----------
    config : Path, optional
        Path to the ``darkdocs.yaml`` configuration file.
    output_dir : Path or None, optional
        Override for ``api.output_dir``.
    dry_run : bool, optional
        Log intended writes instead of writing.
    strict : bool, optional
        Exit with status 1 when broken links or unknown languages were seen.
    verbose, debug : bool, optional
        Raise the log level to INFO or DEBUG.

    Raises
    ------
    SiteConfigError
        If the configuration has no ``api`` section.
    """
    configure_logging(verbose=verbose or dry_run, debug=debug)
    site = load_site_config(config)
    api_config = site.require_api()
    diagnostics = Diagnostics()
    dry_run = dry_run or site.dry_run
    generator = ApiDocGenerator(
        api_config,
        load_api_index(api_config),
        output_dir=output_dir,
        dry_run=dry_run,
        diagnostics=diagnostics,
    )
    _report(generator.run(), diagnostics, dry_run=dry_run, strict=strict)


@app.command(help="Render the manual from its .page sources.")
def manual(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: OutputOption = None,
    dry_run: DryRunOption = False,
    strict: StrictOption = False,
    verbose: VerboseOption = False,
    debug: DebugOption = False,
) -> None:
    """Generate manual pages for the ``manual`` section of the configuration.

    When the configuration also has an ``api`` section its entity feed is
    loaded so ``<?api ?>`` instructions resolve; the API pages themselves are
    not regenerated.
    """
    configure_logging(verbose=verbose or dry_run, debug=debug)
    site = load_site_config(config)
    manual_config = site.require_manual()
    diagnostics = Diagnostics()
    dry_run = dry_run or site.dry_run
    generator = ManualGenerator(
        manual_config,
        load_catalog(manual_config.source_dir),
        index=_load_index(site),
        output_dir=output_dir,
        dry_run=dry_run,
        diagnostics=diagnostics,
    )
    _report(generator.run(), diagnostics, dry_run=dry_run, strict=strict)


@app.command(help="Render API documentation and the manual in one run.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output_dir: OutputOption = None,
    dry_run: DryRunOption = False,
    strict: StrictOption = False,
    verbose: VerboseOption = False,
    debug: DebugOption = False,
) -> None:
    """Run every pipeline the configuration defines.

    With ``--output-dir`` the manual is written to that folder and the API
    pages to its ``api`` subfolder, and manual links into the API follow.
    """
    configure_logging(verbose=verbose or dry_run, debug=debug)
    site = load_site_config(config)
    diagnostics = Diagnostics()
    dry_run = dry_run or site.dry_run
    index = _load_index(site)
    written: list[Path] = []

    if site.api is not None and index is not None:
        api_out = output_dir / "api" if output_dir is not None else None
        written.extend(
            ApiDocGenerator(
                site.api,
                index,
                output_dir=api_out,
                dry_run=dry_run,
                diagnostics=diagnostics,
            ).run()
        )
    if site.manual is not None:
        manual_config = site.manual
        if output_dir is not None and site.api is not None:
            manual_config.api_prefix = "api"
        written.extend(
            ManualGenerator(
                manual_config,
                load_catalog(manual_config.source_dir),
                index=index,
                output_dir=output_dir,
                dry_run=dry_run,
                diagnostics=diagnostics,
            ).run()
        )
    _report(written, diagnostics, dry_run=dry_run, strict=strict)


def main() -> None:
    """Invoke the Cyclopts application behind the ``darkdocs`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
