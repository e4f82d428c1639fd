import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pandera.errors import SchemaError
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from spillway.errors import TransformError

app = typer.Typer(
    name="spillway",
    help="🌊 Spillway: media carryover and diminishing-return transforms",
    add_completion=False,
)

console = Console()
logger = logging.getLogger("spillway")


@app.callback()
def _configure(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging from the transforms"
    ),
) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(message: str) -> NoReturn:
    console.print(f"   ❌ [red]{escape(message)}[/red]")
    raise typer.Exit(1)


@app.command()
def generate(
    output: Path = typer.Option(
        Path("data/spend.csv"), "--output", "-o", help="CSV file for generated spend"
    ),
    weeks: int = typer.Option(104, "--weeks", "-w", help="Number of weekly rows"),
    seed: int = typer.Option(42, "--seed", "-s", help="Random seed for reproducibility"),
    config_output: Optional[Path] = typer.Option(
        None, "--config-output", "-c", help="Also write the default transform config here"
    ),
) -> None:
    from spillway.data.schemas import default_transform_config, save_transform_config
    from spillway.data.synthetic import (
        SyntheticSpendConfig,
        generate_spend_data,
        save_spend_data,
    )

    console.print("\n📺 [bold blue]Spillway[/bold blue] — Synthetic Spend Generator\n")

    if weeks < 1:
        _fail(f"--weeks must be >= 1, got {weeks}")

    config = SyntheticSpendConfig(n_weeks=weeks, random_seed=seed)
    df = generate_spend_data(config)
    path = save_spend_data(df, output)

    console.print(f"✅ [green]Spend data saved to {path}[/green]")
    console.print(f"   📅 {len(df)} weeks × {len(config.channels)} channels")

    if config_output is not None:
        save_transform_config(default_transform_config(config.channels), config_output)
        console.print(f"   ⚙️  Transform config saved to {config_output}")

    console.print()


@app.command()
def transform(
    data_path: Path = typer.Argument(..., help="Path to weekly spend CSV", exists=True),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Transform config JSON (defaults per channel if omitted)",
        exists=True,
        dir_okay=False,
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write contribution series to this CSV"
    ),
    report: Optional[Path] = typer.Option(
        None, "--report", "-r", help="Write the text report to this file"
    ),
    normalize: bool = typer.Option(
        True, "--normalize/--raw", help="Scale each channel by its max spend first"
    ),
) -> None:
    from spillway.data.schemas import default_transform_config, load_transform_config
    from spillway.data.synthetic import load_spend_data
    from spillway.evaluation import (
        compute_contributions,
        format_contribution_report,
        summarize_contributions,
    )

    console.print("\n📺 [bold blue]Spillway[/bold blue] — Channel Contributions\n")

    try:
        if config_path is not None:
            config = load_transform_config(config_path)
            console.print(f"⚙️  Config from [cyan]{config_path}[/cyan]")
        else:
            config = None

        console.print(f"📊 Loading spend from [cyan]{data_path}[/cyan]")
        # Dates are coerced by the spend schema.
        df = load_spend_data(data_path, date_col=None)
        logger.debug("loaded %d rows with columns %s", len(df), list(df.columns))

        if config is None:
            channels = [c for c in df.columns if c.endswith("_spend")]
            if not channels:
                _fail("No '*_spend' columns found and no --config given")
            date_col = "date" if "date" in df.columns else None
            config = default_transform_config(channels, date_col=date_col)
            console.print("⚙️  Using default parameters per channel")

        result = compute_contributions(df, config, normalize=normalize)
    except (TransformError, ValidationError, SchemaError, OSError) as e:
        _fail(f"Transform failed: {e}")

    summary = summarize_contributions(result)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Channel", style="dim")
    table.add_column("L", justify="right")
    table.add_column("P", justify="right")
    table.add_column("D", justify="right")
    table.add_column("K", justify="right")
    table.add_column("S", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Share", justify="right")

    for channel_cfg in config.channels:
        row = summary.loc[channel_cfg.channel]
        table.add_row(
            channel_cfg.channel.replace("_spend", ""),
            str(channel_cfg.carryover.length),
            f"{channel_cfg.carryover.peak:g}",
            f"{channel_cfg.carryover.decay:.2f}",
            f"{channel_cfg.hill.half_saturation:.2f}",
            f"{channel_cfg.hill.slope:.1f}",
            f"{float(row['total']):.3f}",
            f"{float(row['share']):.1%}",
        )

    console.print()
    console.print(table)

    if output is not None:
        output.parent.mkdir(exist_ok=True, parents=True)
        result.contributions.to_csv(output)
        console.print(f"\n✅ [green]Contributions saved to {output}[/green]")

    if report is not None:
        report.parent.mkdir(exist_ok=True, parents=True)
        with open(report, "w", encoding="utf-8") as f:
            f.write(format_contribution_report(summary))
        console.print(f"✅ Report saved to {report}")

    console.print()


@app.command()
def weights(
    length: int = typer.Option(..., "--length", "-l", help="Window length L (>= 1)"),
    peak: float = typer.Option(0.0, "--peak", "-p", help="Peak lag P (>= 0)"),
    decay: float = typer.Option(..., "--decay", "-d", help="Decay D in [0, 1]"),
) -> None:
    from spillway.transforms.adstock import carryover_weights

    try:
        raw = carryover_weights(length, peak, decay, normalize=False)
    except TransformError as e:
        _fail(str(e))

    normalized = raw / raw.sum()

    table = Table(
        title=f"Carryover weights (L={length}, P={peak:g}, D={decay:g})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Lag", justify="right")
    table.add_column("Raw", justify="right")
    table.add_column("Normalized", justify="right")

    for lag, (w, n) in enumerate(zip(raw, normalized)):
        table.add_row(str(lag), f"{w:.4f}", f"{n:.4f}")

    console.print(table)


@app.command()
def hill(
    values: list[float] = typer.Argument(..., help="Adstocked inputs to evaluate"),
    half_saturation: float = typer.Option(
        ..., "--half-saturation", "-k", help="Half-saturation point K (> 0)"
    ),
    slope: float = typer.Option(..., "--slope", "-s", help="Slope S (> 0)"),
) -> None:
    from spillway.transforms.saturation import hill_marginal_response, hill_saturation

    try:
        effects = hill_saturation(values, half_saturation, slope)
        marginal = hill_marginal_response(values, half_saturation, slope)
    except TransformError as e:
        _fail(str(e))

    table = Table(
        title=f"Hill saturation (K={half_saturation:g}, S={slope:g})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("x", justify="right")
    table.add_column("hill(x)", justify="right")
    table.add_column("d hill / dx", justify="right")

    for x, h, m in zip(values, effects, marginal):
        table.add_row(f"{x:g}", f"{h:.4f}", f"{m:.4g}")

    console.print(table)


@app.command()
def plot(
    show_carryover: bool = typer.Option(True, "--carryover/--no-carryover"),
    show_saturation: bool = typer.Option(True, "--saturation/--no-saturation"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save plots to directory"
    ),
) -> None:
    import matplotlib.pyplot as plt

    from spillway.transforms import (
        CHANNEL_CARRYOVER_DEFAULTS,
        CHANNEL_SATURATION_DEFAULTS,
        plot_carryover_weights,
        plot_saturation_curve,
    )

    console.print("\n📺 [bold blue]Spillway[/bold blue] — Default Transform Parameters\n")

    if show_carryover:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Channel", style="dim")
        table.add_column("L (length)", justify="right")
        table.add_column("P (peak)", justify="right")
        table.add_column("D (decay)", justify="right")
        table.add_column("Description")

        for channel, params in CHANNEL_CARRYOVER_DEFAULTS.items():
            table.add_row(
                channel.replace("_spend", ""),
                str(int(params["length"])),
                f"{float(params['peak']):g}",
                f"{float(params['decay']):.2f}",
                str(params.get("description", ""))[:50],
            )

        console.print(table)

        fig = plot_carryover_weights(
            {ch.replace("_spend", ""): p for ch, p in CHANNEL_CARRYOVER_DEFAULTS.items()}
        )
        if output is not None:
            output.mkdir(exist_ok=True, parents=True)
            fig.savefig(output / "carryover_weights.png", dpi=150, bbox_inches="tight")
            console.print(f"\n✅ Saved carryover plot to {output / 'carryover_weights.png'}")
        else:
            plt.show()
        plt.close(fig)

    if show_saturation:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Channel", style="dim")
        table.add_column("K (half-sat)", justify="right")
        table.add_column("S (slope)", justify="right")
        table.add_column("Description")

        for channel, params in CHANNEL_SATURATION_DEFAULTS.items():
            table.add_row(
                channel.replace("_spend", ""),
                f"{float(params['K']):.2f}",
                f"{float(params['S']):.1f}",
                str(params.get("description", ""))[:50],
            )

        console.print()
        console.print(table)

        fig = plot_saturation_curve(
            {ch.replace("_spend", ""): p for ch, p in CHANNEL_SATURATION_DEFAULTS.items()}
        )
        if output is not None:
            output.mkdir(exist_ok=True, parents=True)
            fig.savefig(output / "saturation_curves.png", dpi=150, bbox_inches="tight")
            console.print(f"✅ Saved saturation plot to {output / 'saturation_curves.png'}")
        else:
            plt.show()
        plt.close(fig)

    console.print()


@app.command()
def info() -> None:
    console.print(
        """
[bold blue]🌊 Spillway[/bold blue]
[dim]Media carryover and diminishing-return transforms[/dim]

[bold]Adstock (carryover)[/bold]
Weight for lag l:  D ^ ((l - P)^2)   for l = 0 .. L-1
Each week becomes the weighted mean of itself and the L-1 weeks before it,
so the effect can build to a delayed peak at lag P and fade at rate D.

[bold]Saturation (diminishing returns)[/bold]
hill(x) = 1 / (1 + (x / K)^(-S)),  hill(0) = 0,  hill(K) = 0.5

[bold]Commands[/bold]
  spillway generate    Generate synthetic weekly spend
  spillway transform   Adstock + saturate every channel of a spend CSV
  spillway weights     Show carryover weights for L, P, D
  spillway hill        Evaluate the Hill curve for K, S
  spillway plot        Plot the default channel transforms

[bold]Quick Start[/bold]
  $ spillway generate --config-output data/transforms.json
  $ spillway transform data/spend.csv --config data/transforms.json
"""
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
