"""Package entry point - composition root. Wire dependencies and run the CLI app."""

import logging

from typesafe.infrastructure.di.container import TypesafeContainer
from typesafe.interface.cli import CLIAppFactory, CLIDependencies
from typesafe.interface.reporters import ViolationReporter


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    container = TypesafeContainer.get_instance()
    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        astroid_gateway=container.get_astroid_gateway(),
        filesystem=container.get_filesystem_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
        reporter=ViolationReporter(container.get_guidance_service()),
        engines=container.get_engines(),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
