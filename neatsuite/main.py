"""Main entry point for the neatsuite command line interface.

Sets up the Typer CLI application, performs dependency injection
(Composition Root) and delegates execution to the CommandHandler.
Nothing is configured at import time; dependencies are built when a
command runs.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

from neatsuite.core.client import NetSuiteClient
from neatsuite.core.command_handler import CommandHandler
from neatsuite.domain.models.common import HTTP_METHODS
from neatsuite.infrastructure.cli.display import ConsoleDisplay
from neatsuite.infrastructure.config.settings import get_config, load_client_config, load_configuration
from neatsuite.infrastructure.monitoring.logger_setup import StdlibLogger, setup_logging

logger = logging.getLogger(__name__)

# --- Dependency Injection (Manual) ---

def create_client(config_file: Optional[Path] = None) -> NetSuiteClient:
    """Builds a client from the loaded configuration."""
    config = load_client_config(config_file=config_file)
    return NetSuiteClient(config, logger=StdlibLogger())


def create_command_handler(config_file: Optional[Path] = None) -> CommandHandler:
    """Loads configuration, configures logging and wires the handler."""
    load_configuration(config_file=config_file)
    log_level_name = str(get_config('logging.level', 'WARNING')).upper()
    log_level = getattr(logging, log_level_name, logging.WARNING)
    setup_logging(log_level=log_level, log_file=get_config('logging.file'))

    return CommandHandler(
        client_factory=lambda: create_client(config_file),
        ui=ConsoleDisplay(),
    )

# --- Typer App Definition ---
app = typer.Typer(
    name="neatsuite",
    help="Call NetSuite RESTlets and REST endpoints with OAuth 1.0a signing, retries and logging.",
    add_completion=False,
)

# --- Option parsing helpers ---

def parse_params(values: Optional[List[str]]) -> Dict[str, str]:
    """Turns repeated ``key=value`` options into a dict."""
    params: Dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{item}'", param_hint="--param")
        params[key] = value
    return params


def parse_body(body: Optional[str]) -> Any:
    if body is None:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Body is not valid JSON: {e}", param_hint="--body")


def parse_method(method: str) -> str:
    method = method.upper()
    if method not in HTTP_METHODS:
        raise typer.BadParameter(f"Method must be one of {', '.join(HTTP_METHODS)}", param_hint="method")
    return method

# --- CLI Commands ---

ConfigFileOption = Annotated[
    Optional[Path],
    typer.Option("--config-file", "-c", help="YAML configuration file (default: ~/.neatsuite/config.yaml)."),
]


@app.command(name="validate-config")
def validate_config_command(config_file: ConfigFileOption = None):
    """Checks that every required setting is present."""
    handler = create_command_handler(config_file)
    if not handler.handle_validate_config():
        raise typer.Exit(code=1)


@app.command()
def restlet(
    script: Annotated[str, typer.Option("--script", "-s", help="RESTlet script id.")],
    deploy: Annotated[str, typer.Option("--deploy", "-d", help="RESTlet deployment id.")],
    param: Annotated[Optional[List[str]], typer.Option("--param", "-p", help="Extra query parameter as key=value (repeatable).")] = None,
    method: Annotated[str, typer.Option("--method", "-m", help="HTTP method.")] = "GET",
    body: Annotated[Optional[str], typer.Option("--body", "-b", help="JSON request body.")] = None,
    config_file: ConfigFileOption = None,
):
    """Calls a RESTlet deployment."""
    params = parse_params(param)
    payload = parse_body(body)
    verb = parse_method(method)
    handler = create_command_handler(config_file)
    if not asyncio.run(handler.handle_restlet(script, deploy, params=params, method=verb, body=payload)):
        raise typer.Exit(code=1)


@app.command()
def request(
    method: Annotated[str, typer.Argument(help="HTTP method (GET, POST, PUT, PATCH, DELETE).")],
    url: Annotated[str, typer.Argument(help="Absolute NetSuite URL.")],
    body: Annotated[Optional[str], typer.Option("--body", "-b", help="JSON request body.")] = None,
    config_file: ConfigFileOption = None,
):
    """Sends a signed request to any NetSuite URL."""
    verb = parse_method(method)
    payload = parse_body(body)
    handler = create_command_handler(config_file)
    if not asyncio.run(handler.handle_request(verb, url, body=payload)):
        raise typer.Exit(code=1)

# --- Main Execution Guard ---

def cli_entry_point():
    """Function called by the console script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
