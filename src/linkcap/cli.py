"""
linkcap Command Line Interface.

Commands:
- linkcap estimate               : Estimate capacity for one observation
- linkcap rank <survey.yaml>     : Rank the candidates of a survey
- linkcap sweep                  : Effective downlink over an RSSI range
- linkcap validate <survey.yaml> : Validate a survey file
- linkcap server                 : Start the capacity estimation server
"""

import json
import logging
import sys
from pathlib import Path

import click
import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from linkcap import __version__
from linkcap.capacity.models import CapacityEstimate, compare_capacity
from linkcap.channel.noise import NoisePreset
from linkcap.phy.standards import ChannelWidth, WiFiBand, WifiStandard

console = Console()

BAND_CHOICES = [b.value for b in WiFiBand]
STANDARD_CHOICES = [s.value for s in WifiStandard]
WIDTH_CHOICES = [str(w.value) for w in ChannelWidth]
PRESET_CHOICES = [p.value for p in NoisePreset if p != NoisePreset.CUSTOM]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _fmt_mbps(value: float | None) -> str:
    return "-" if value is None else f"{value:.1f}"


def _print_estimates(estimates: list[CapacityEstimate], title: str) -> None:
    """Print a table of capacity estimates."""
    table = Table(title=title)
    table.add_column("BSSID", style="cyan")
    table.add_column("Std")
    table.add_column("Band")
    table.add_column("Width", justify="right")
    table.add_column("NSS", justify="right")
    table.add_column("SNR", justify="right")
    table.add_column("MCS", justify="right")
    table.add_column("PHY Mbps", justify="right")
    table.add_column("DL Mbps", justify="right", style="green")
    table.add_column("UL Mbps", justify="right")
    table.add_column("Avail Mbps", justify="right")
    table.add_column("Category")

    for e in estimates:
        table.add_row(
            e.bssid,
            e.standard.display_name,
            e.band.display_name,
            e.channel_width.display_name,
            str(e.nss),
            f"{e.snr_db:.1f} dB",
            "-" if e.max_mcs is None else str(e.max_mcs),
            _fmt_mbps(e.max_phy_rate_mbps),
            _fmt_mbps(e.estimated_effective_downlink_mbps),
            _fmt_mbps(e.estimated_effective_uplink_mbps),
            _fmt_mbps(e.utilization_adjusted_downlink_mbps),
            e.capacity_category.display_name,
        )

    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="linkcap")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def main(verbose: bool) -> None:
    """linkcap - WiFi link capacity estimation

    Estimate achievable throughput from RSSI, band, PHY standard, channel
    width and spatial streams.
    """
    setup_logging(verbose)


@main.command()
@click.option("--rssi", "rssi_dbm", type=float, required=True, help="RSSI in dBm")
@click.option("--band", type=click.Choice(BAND_CHOICES), required=True)
@click.option("--standard", type=click.Choice(STANDARD_CHOICES), required=True)
@click.option("--width", type=click.Choice(WIDTH_CHOICES), default="20", help="Channel width in MHz")
@click.option("--nss", type=click.IntRange(1, 16), default=None, help="Spatial streams (default: estimate)")
@click.option("--utilization", type=float, default=None, help="Channel utilization in percent")
@click.option("--uplink-ratio", type=float, default=0.75, show_default=True)
@click.option("--min-margin", type=float, default=3.0, show_default=True, help="Minimum link margin in dB")
@click.option("--noise-preset", type=click.Choice(PRESET_CHOICES), default="default", show_default=True)
@click.option("--bssid", default="00:00:00:00:00:00", help="BSS identifier for the report")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def estimate(
    rssi_dbm: float,
    band: str,
    standard: str,
    width: str,
    nss: int | None,
    utilization: float | None,
    uplink_ratio: float,
    min_margin: float,
    noise_preset: str,
    bssid: str,
    as_json: bool,
) -> None:
    """Estimate capacity for a single observation."""
    from pydantic import ValidationError

    from linkcap.config.loader import format_validation_errors
    from linkcap.config.schema import EstimatorConfig

    try:
        config = EstimatorConfig(
            noise_preset=NoisePreset(noise_preset),
            min_link_margin_db=min_margin,
            uplink_ratio=uplink_ratio,
        )
        result = config.build_estimator().estimate_capacity(
            bssid=bssid,
            rssi_dbm=rssi_dbm,
            band=WiFiBand(band),
            standard=WifiStandard(standard),
            channel_width=ChannelWidth.from_mhz(int(width)),
            nss=nss,
            channel_utilization_pct=utilization,
        )
    except ValidationError as e:
        console.print(f"[bold red]Invalid input:[/]\n{format_validation_errors(e.errors())}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[bold red]Invalid input:[/] {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _print_estimates([result], "Capacity Estimate")
    if result.max_mcs is None:
        console.print("[yellow]Signal too weak for any MCS at the required margin[/]")


@main.command()
@click.argument("survey", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def rank(survey: Path, as_json: bool) -> None:
    """Rank the candidates in a survey by effective downlink.

    SURVEY is the path to a survey.yaml file.
    """
    from linkcap.config.loader import SurveyLoader, SurveyLoadError

    try:
        config = SurveyLoader(survey).load()
        estimator = config.estimator.build_estimator()
        ranked = estimator.estimate_capacity_for_multiple_bss(config.bss_data())
    except (SurveyLoadError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Ranking failed:[/] {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in ranked], indent=2))
        return

    _print_estimates(ranked, f"Capacity Ranking: {config.name}")

    best = ranked[0]
    console.print(
        f"\n[bold green]Best:[/] {best.bssid} "
        f"({_fmt_mbps(best.estimated_effective_downlink_mbps)} Mbps, "
        f"{best.capacity_category.display_name})"
    )
    if len(ranked) > 1:
        comparison = compare_capacity(ranked[0], ranked[1])
        verdict = "significant" if comparison.is_significant_difference else "marginal"
        console.print(
            f"Lead over {ranked[1].bssid}: "
            f"{comparison.capacity_difference_mbps:.1f} Mbps "
            f"({comparison.capacity_difference_pct:.0f}%, {verdict})"
        )


@main.command()
@click.option("--band", type=click.Choice(BAND_CHOICES), required=True)
@click.option("--standard", type=click.Choice(STANDARD_CHOICES), required=True)
@click.option("--width", type=click.Choice(WIDTH_CHOICES), default="20", help="Channel width in MHz")
@click.option("--nss", type=click.IntRange(1, 16), default=None, help="Spatial streams (default: estimate)")
@click.option("--rssi-min", type=float, default=-90.0, show_default=True)
@click.option("--rssi-max", type=float, default=-30.0, show_default=True)
@click.option("--step", type=float, default=5.0, show_default=True, help="RSSI step in dB")
def sweep(
    band: str,
    standard: str,
    width: str,
    nss: int | None,
    rssi_min: float,
    rssi_max: float,
    step: float,
) -> None:
    """Show effective downlink over an RSSI range."""
    from linkcap.capacity.estimator import CapacityEstimator

    if step <= 0 or rssi_max < rssi_min:
        console.print("[bold red]Invalid range:[/] need rssi-min <= rssi-max and step > 0")
        sys.exit(1)

    # Last point is the largest rssi_min + k * step that does not pass rssi_max
    num_points = int(np.floor((rssi_max - rssi_min) / step + 1e-9)) + 1
    try:
        rssi, downlink = CapacityEstimator().downlink_vs_rssi(
            band=WiFiBand(band),
            standard=WifiStandard(standard),
            channel_width=ChannelWidth.from_mhz(int(width)),
            nss=nss,
            rssi_min=rssi_min,
            rssi_max=min(rssi_min + (num_points - 1) * step, rssi_max),
            num_points=num_points,
        )
    except ValueError as e:
        console.print(f"[bold red]Sweep failed:[/] {e}")
        sys.exit(1)

    table = Table(title=f"{WifiStandard(standard).display_name} {width} MHz, {WiFiBand(band).display_name}")
    table.add_column("RSSI (dBm)", justify="right", style="cyan")
    table.add_column("DL Mbps", justify="right", style="green")
    for r, d in zip(rssi, downlink):
        table.add_row(f"{r:.1f}", "-" if np.isnan(d) else f"{d:.1f}")
    console.print(table)


@main.command()
@click.argument("survey", type=click.Path(exists=True, path_type=Path))
def validate(survey: Path) -> None:
    """Validate a survey file.

    Checks the survey file for errors and prints a summary.
    """
    from linkcap.config.loader import SurveyLoader, SurveyLoadError

    console.print(f"[bold blue]Validating:[/] {survey}")

    try:
        config = SurveyLoader(survey).load()
        console.print("[green]✓ Survey syntax valid[/]")
    except SurveyLoadError as e:
        console.print(f"[red]✗ Survey validation failed:[/]\n{e}")
        sys.exit(1)

    if config.estimator.mcs_snr_table is not None:
        if config.estimator.mcs_snr_table.exists():
            console.print(f"[green]✓ MCS table exists:[/] {config.estimator.mcs_snr_table}")
        else:
            console.print(f"[red]✗ MCS table not found:[/] {config.estimator.mcs_snr_table}")
            sys.exit(1)

    table = Table(title="Survey Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Name", config.name)
    table.add_row("Candidates", str(len(config.candidates)))
    table.add_row("Noise preset", config.estimator.noise_preset.value)
    table.add_row("Min link margin", f"{config.estimator.min_link_margin_db} dB")
    table.add_row("Uplink ratio", f"{config.estimator.uplink_ratio}")

    console.print(table)
    console.print("\n[green]Validation complete[/]")


@main.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to")
@click.option("-p", "--port", default=8000, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option(
    "-c",
    "--config",
    "survey",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Survey file whose estimator settings the server uses",
)
def server(host: str, port: int, reload: bool, survey: Path | None) -> None:
    """Start the capacity estimation server."""
    import uvicorn

    from linkcap import server as capacity_server
    from linkcap.config.loader import SurveyLoader, SurveyLoadError

    if survey is not None:
        try:
            capacity_server.configure(SurveyLoader(survey).load().estimator)
        except (SurveyLoadError, FileNotFoundError, ValueError) as e:
            console.print(f"[bold red]Invalid server config:[/] {e}")
            sys.exit(1)

    console.print(f"[bold blue]Starting capacity server on {host}:{port}[/]")

    uvicorn.run(
        capacity_server.app if not reload else "linkcap.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
