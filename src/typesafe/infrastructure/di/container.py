from typing import TYPE_CHECKING, Any, Optional, cast

from typesafe.domain.config import ConfigurationLoader
from typesafe.domain.engine import RuleEngine
from typesafe.domain.known_apis import KnownAPIRegistry
from typesafe.domain.rules.optional_usage import OptionalUsageRule
from typesafe.domain.rules.result_usage import ResultUsageRule
from typesafe.infrastructure.config_file_loader import ConfigFileLoader
from typesafe.infrastructure.gateways.astroid_gateway import AstroidGateway
from typesafe.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from typesafe.infrastructure.gateways.source_fixer_gateway import SourceFixerGateway
from typesafe.infrastructure.services.guidance_service import GuidanceService
from typesafe.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from typesafe.domain.protocols import (
        AstroidProtocol,
        FileSystemProtocol,
        FixerGatewayProtocol,
        TelemetryPort,
    )


class TypesafeContainer:
    """Dependency Injection Container for the typesafe linter."""

    _instance: Optional["TypesafeContainer"] = None

    def __init__(self, registry: KnownAPIRegistry | None = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(registry)

    def _register_defaults(self, registry: KnownAPIRegistry | None) -> None:
        """Register default implementations for protocols."""
        config_loader = ConfigurationLoader(ConfigFileLoader.load_config())
        self.register_singleton("ConfigurationLoader", config_loader)
        self.register_singleton("TelemetryPort", ProjectTelemetry("typesafe"))
        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        self.register_singleton("AstroidGateway", AstroidGateway(filesystem))
        self.register_singleton("SourceFixerGateway", SourceFixerGateway())
        self.register_singleton("GuidanceService", GuidanceService())

        api_registry = registry or KnownAPIRegistry()
        self.register_singleton("KnownAPIRegistry", api_registry)
        self.register_singleton(
            "OptionalEngine", RuleEngine(OptionalUsageRule(), registry=api_registry)
        )
        self.register_singleton(
            "ResultEngine", RuleEngine(ResultUsageRule(), registry=api_registry)
        )

    # JUSTIFICATION: DI Container must handle any type of service
    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    # JUSTIFICATION: DI Container must return any type of service
    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_astroid_gateway(self) -> "AstroidProtocol":
        """Return the Astroid gateway."""
        return cast("AstroidProtocol", self.get("AstroidGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        return cast("FixerGatewayProtocol", self.get("SourceFixerGateway"))

    def get_guidance_service(self) -> GuidanceService:
        return cast(GuidanceService, self.get("GuidanceService"))

    def get_engines(self) -> dict[str, RuleEngine]:
        """Engines keyed by rule family value ('optional', 'result')."""
        return {
            "optional": cast(RuleEngine, self.get("OptionalEngine")),
            "result": cast(RuleEngine, self.get("ResultEngine")),
        }

    @classmethod
    def get_instance(cls) -> "TypesafeContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = TypesafeContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
