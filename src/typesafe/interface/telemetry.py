"""Terminal telemetry: TelemetryPort over logging and typer.echo."""

import logging

import typer

from typesafe.domain.protocols import TelemetryPort

logger = logging.getLogger("typesafe")


class ProjectTelemetry(TelemetryPort):
    """Echoes progress to stderr (stdout stays free for reports) and mirrors it to the debug log."""

    def __init__(self, project_name: str) -> None:
        self.project_name = project_name

    def step(self, message: str) -> None:
        logger.debug("step: %s", message)
        typer.echo(message, err=True)

    def warning(self, message: str) -> None:
        logger.debug("warning: %s", message)
        typer.secho(f"{self.project_name}: {message}", fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        logger.debug("error: %s", message)
        typer.secho(f"{self.project_name}: {message}", fg=typer.colors.RED, err=True)
