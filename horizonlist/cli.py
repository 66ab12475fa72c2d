from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

import requests
import typer

from .clients.projects_http import ProjectsHttp
from .config import AppConfig, load_config, resolve_path
from .logging_setup import setup_logging
from .types import ProjectQuery

app = typer.Typer(add_completion=False)


def _default_config_path() -> Path:
    return Path(__file__).resolve().parent.parent / "configs" / "config.example.yaml"


def _load_config(path: Optional[Path]) -> AppConfig:
    if path is None:
        path = _default_config_path() if _default_config_path().exists() else None
    if path is None:
        return AppConfig()
    return load_config(resolve_path(str(path)))


def _create_client(config: AppConfig, base_url: Optional[str]) -> ProjectsHttp:
    if base_url:
        config.service.base_url = base_url.rstrip("/")
    return ProjectsHttp.from_config(config.service)


def _split(values: Optional[List[str]]) -> List[str]:
    result: List[str] = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


def _parse_sizes(values: Optional[List[str]]) -> List[Tuple[int, int]]:
    sizes: List[Tuple[int, int]] = []
    for value in _split(values):
        low, sep, high = value.partition("-")
        try:
            low_num, high_num = int(low), int(high)
        except ValueError:
            raise typer.BadParameter(f"Size range must look like FROM-TO, got {value!r}") from None
        if not sep or low_num > high_num:
            raise typer.BadParameter(f"Invalid size range {value!r}")
        sizes.append((low_num, high_num))
    return sizes


class SortChoice(str, Enum):
    TIMEDESC = "timedesc"
    TIMEASC = "timeasc"
    NAMEDESC = "namedesc"
    NAMEASC = "nameasc"
    RECENTDESC = "recentdesc"
    RECENTASC = "recentasc"


def _build_query(
    cfg: AppConfig,
    search: Optional[str],
    sort: Optional[SortChoice],
    vertical: Optional[List[str]],
    integration: Optional[List[str]],
    dev: Optional[List[str]],
    stage: Optional[List[str]],
    distribution: Optional[List[str]],
    size: Optional[List[str]],
) -> ProjectQuery:
    return ProjectQuery(
        search=cfg.widget.search if search is None else search,
        sort=sort.value if sort is not None else cfg.widget.sort,
        vertical=_split(vertical),
        integration=_split(integration),
        dev=_split(dev),
        stage=_split(stage),
        distribution=_split(distribution),
        size=_parse_sizes(size),
    )


SearchOption = typer.Option(None, "--search", "-q", help="Search string sent as q")
SortOption = typer.Option(None, "--sort", case_sensitive=False, help="Result order")
ConfigOption = typer.Option(None, "--config", help="Path to YAML config")
BaseUrlOption = typer.Option(None, "--base-url", help="Data service base URL")
VerticalOption = typer.Option(None, "--vertical")
IntegrationOption = typer.Option(None, "--integration")
DevOption = typer.Option(None, "--dev")
StageOption = typer.Option(None, "--stage")
DistributionOption = typer.Option(None, "--distribution")
SizeOption = typer.Option(None, "--size", help="Team size range FROM-TO")


@app.command("list")
def list_projects(
    config: Optional[Path] = ConfigOption,
    search: Optional[str] = SearchOption,
    sort: Optional[SortChoice] = SortOption,
    base_url: Optional[str] = BaseUrlOption,
    vertical: Optional[List[str]] = VerticalOption,
    integration: Optional[List[str]] = IntegrationOption,
    dev: Optional[List[str]] = DevOption,
    stage: Optional[List[str]] = StageOption,
    distribution: Optional[List[str]] = DistributionOption,
    size: Optional[List[str]] = SizeOption,
) -> None:
    cfg = _load_config(config)
    logger = setup_logging(cfg.logging)
    client = _create_client(cfg, base_url)
    query = _build_query(cfg, search, sort, vertical, integration, dev, stage, distribution, size)
    try:
        projects = client.list_projects(query)
    except (requests.RequestException, ValueError) as exc:
        logger.error("Project list failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    if not isinstance(projects, list):
        typer.echo(f"Error: unexpected payload {type(projects).__name__}", err=True)
        raise typer.Exit(code=1)
    for account_id in projects:
        typer.echo(account_id)


@app.command()
def url(
    config: Optional[Path] = ConfigOption,
    search: Optional[str] = SearchOption,
    sort: Optional[SortChoice] = SortOption,
    base_url: Optional[str] = BaseUrlOption,
    vertical: Optional[List[str]] = VerticalOption,
    integration: Optional[List[str]] = IntegrationOption,
    dev: Optional[List[str]] = DevOption,
    stage: Optional[List[str]] = StageOption,
    distribution: Optional[List[str]] = DistributionOption,
    size: Optional[List[str]] = SizeOption,
) -> None:
    cfg = _load_config(config)
    client = _create_client(cfg, base_url)
    query = _build_query(cfg, search, sort, vertical, integration, dev, stage, distribution, size)
    typer.echo(client.build_url(query))


@app.command()
def similar(
    account_id: str = typer.Argument(..., help="Project account id"),
    config: Optional[Path] = ConfigOption,
    base_url: Optional[str] = BaseUrlOption,
) -> None:
    cfg = _load_config(config)
    logger = setup_logging(cfg.logging)
    client = _create_client(cfg, base_url)
    try:
        projects = client.similar_projects(account_id)
    except (requests.RequestException, ValueError) as exc:
        logger.error("Similar projects failed for %s: %s", account_id, exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    if not isinstance(projects, list):
        typer.echo(f"Error: unexpected payload {type(projects).__name__}", err=True)
        raise typer.Exit(code=1)
    for item in projects:
        typer.echo(item)


@app.command()
def completion(
    config: Optional[Path] = ConfigOption,
    base_url: Optional[str] = BaseUrlOption,
) -> None:
    cfg = _load_config(config)
    logger = setup_logging(cfg.logging)
    client = _create_client(cfg, base_url)
    try:
        payload = client.completion()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Project completion failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    entries = payload.get("list") if isinstance(payload, dict) else None
    if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
        typer.echo(f"Error: unexpected payload {type(payload).__name__}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"avg: {payload.get('avg')}")
    for entry in entries:
        typer.echo(f"{entry.get('id')}\t{entry.get('completion')}")


@app.command()
def gui(config: Optional[Path] = ConfigOption) -> None:
    from .gui.main import main as gui_main

    if config is None and _default_config_path().exists():
        config = _default_config_path()
    gui_main(config)


if __name__ == "__main__":
    app()
