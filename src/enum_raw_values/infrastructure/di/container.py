from typing import TYPE_CHECKING, Any, Optional, cast

from enum_raw_values.domain.config import ConfigurationLoader
from enum_raw_values.infrastructure.config_file_loader import ConfigFileLoader
from enum_raw_values.infrastructure.gateways.astroid_gateway import AstroidDeclarationGateway
from enum_raw_values.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from enum_raw_values.infrastructure.gateways.libcst_editor_gateway import LibCSTEditorGateway
from enum_raw_values.interface.reporters import TerminalDiagnosticReporter
from enum_raw_values.interface.telemetry import ProjectTelemetry
from enum_raw_values.use_cases.apply_fixes import ApplyFixesUseCase
from enum_raw_values.use_cases.check_sources import CheckSourcesUseCase
from enum_raw_values.use_cases.expand import EnumRawValuesExpander
from enum_raw_values.use_cases.expand_module import ExpandModuleUseCase

if TYPE_CHECKING:
    from enum_raw_values.domain.protocols import TelemetryPort


class EnumRawValuesContainer:
    """Dependency Injection Container for enum-raw-values."""

    _instance: Optional["EnumRawValuesContainer"] = None

    def __init__(self, config_dict: Optional[dict[str, object]] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_dict)

    def _register_defaults(self, config_dict: Optional[dict[str, object]]) -> None:
        """Register default implementations for protocols."""
        if config_dict is None:
            config_dict = ConfigFileLoader.load_config_from_fs()
        config_loader = ConfigurationLoader(config_dict)
        self.register_singleton("ConfigurationLoader", config_loader)
        options = config_loader.options

        telemetry = ProjectTelemetry("ENUM RAW VALUES", "cyan")
        self.register_singleton("TelemetryPort", telemetry)
        self.register_singleton("TerminalDiagnosticReporter", TerminalDiagnosticReporter())

        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        reader = AstroidDeclarationGateway(options)
        self.register_singleton("AstroidDeclarationGateway", reader)
        editor = LibCSTEditorGateway(options.attribute_names)
        self.register_singleton("LibCSTEditorGateway", editor)

        expander = EnumRawValuesExpander(options)
        self.register_singleton("EnumRawValuesExpander", expander)
        module_expander = ExpandModuleUseCase(reader, expander, editor, filesystem, telemetry)
        self.register_singleton("ExpandModuleUseCase", module_expander)
        self.register_singleton(
            "ApplyFixesUseCase", ApplyFixesUseCase(module_expander, filesystem, telemetry)
        )
        self.register_singleton(
            "CheckSourcesUseCase", CheckSourcesUseCase(module_expander, filesystem, telemetry)
        )

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_reporter(self) -> TerminalDiagnosticReporter:
        return cast(TerminalDiagnosticReporter, self.get("TerminalDiagnosticReporter"))

    def get_declaration_reader(self) -> AstroidDeclarationGateway:
        return cast(AstroidDeclarationGateway, self.get("AstroidDeclarationGateway"))

    def get_expander(self) -> EnumRawValuesExpander:
        return cast(EnumRawValuesExpander, self.get("EnumRawValuesExpander"))

    def get_expand_module_use_case(self) -> ExpandModuleUseCase:
        return cast(ExpandModuleUseCase, self.get("ExpandModuleUseCase"))

    def get_apply_fixes_use_case(self) -> ApplyFixesUseCase:
        return cast(ApplyFixesUseCase, self.get("ApplyFixesUseCase"))

    def get_check_sources_use_case(self) -> CheckSourcesUseCase:
        return cast(CheckSourcesUseCase, self.get("CheckSourcesUseCase"))

    @classmethod
    def get_instance(cls) -> "EnumRawValuesContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = EnumRawValuesContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
