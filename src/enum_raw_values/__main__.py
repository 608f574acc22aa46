"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from enum_raw_values.infrastructure.di.container import EnumRawValuesContainer
from enum_raw_values.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = EnumRawValuesContainer()

    deps = CLIDependencies(
        telemetry=container.get_telemetry_port(),
        reporter=container.get_reporter(),
        check_use_case=container.get_check_sources_use_case(),
        fix_use_case=container.get_apply_fixes_use_case(),
        expand_use_case=container.get_expand_module_use_case(),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
