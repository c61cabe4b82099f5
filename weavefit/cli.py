#!filepath: weavefit/cli.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich import print
from rich.console import Console
from rich.table import Table

from weavefit import __version__
from weavefit.config.app_config import AppConfig
from weavefit.utils.errors import UserInputError, WeavefitError
from weavefit.utils.logger import init_logging

app = typer.Typer(help="WeaveFit regression comparison CLI")
console = Console()


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def run(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    data: Optional[Path] = typer.Option(None, "--data", help="input table (csv / parquet)"),
    output: Optional[Path] = typer.Option(None, "--output", help="report root directory"),
    workers: Optional[int] = typer.Option(None, "--workers", help="CV worker processes"),
    seed: Optional[int] = typer.Option(None, "--seed", help="random seed"),
    run_id: Optional[str] = typer.Option(None, "--run-id", help="report sub-directory name"),
):
    """
    Run the OLS / Ridge / LASSO comparison for every target.

    --data and --output are relative to the current directory.
    """
    from weavefit.workflows.regression_comparison import build_regression_comparison

    try:
        cfg = AppConfig.load(str(config) if config is not None else None)
    except FileNotFoundError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    if data is not None:
        cfg.data.path = str(data.resolve())
    if output is not None:
        cfg.pipeline.output_dir = str(output.resolve())
    if workers is not None:
        cfg.pipeline.max_workers = workers
    if seed is not None:
        cfg.analysis.seed = seed

    init_logging(cfg.log)

    print(f"[green]Running regression comparison on {cfg.data.path}[/green]")

    try:
        ctx = build_regression_comparison(cfg).run(run_id)
    except UserInputError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(2)
    except WeavefitError as e:
        print(f"[red]{e.kind}: {e}[/red]")
        raise typer.Exit(2)

    report = ctx.report
    console.print(_render(report.formatted, "RMSE | standardized RMSE"))
    if not report.lambdas.empty:
        console.print(_render(report.lambdas, "Selected lambda"))
    if not report.failures.empty:
        console.print(_render(report.failures, "Failures", index=False))

    print(f"[blue]Reports written to {ctx.output_dir}[/blue]")

    if report.evaluations.empty:
        raise typer.Exit(1)


def _render(df: pd.DataFrame, title: str, *, index: bool = True) -> Table:
    table = Table(title=title)

    if index:
        table.add_column(df.index.name or "method")
    for col in df.columns:
        table.add_column(" / ".join(map(str, col)) if isinstance(col, tuple) else str(col))

    for idx, row in df.iterrows():
        cells = [_cell(v) for v in row.tolist()]
        table.add_row(*([str(idx)] if index else []), *cells)

    return table


def _cell(value) -> str:
    if isinstance(value, float):
        return "" if pd.isna(value) else f"{value:.6g}"
    return "" if value is None else str(value)


if __name__ == "__main__":
    app()

# python -m weavefit.cli run --data data/weaving.csv
