from pathlib import Path

import typer
from loguru import logger
from typing_extensions import Annotated

from extension_testkit.config.settings import TestkitSettings
from extension_testkit.primitives.errors import TestkitError
from extension_testkit.service_collections.service_collection import get_component_registry
from extension_testkit.services.extension_initializer_service.api import ExtensionInitializer
from extension_testkit.services.repository_service.api import ExtensionRepositoryManager
from extension_testkit.testing.repository_fixture import RepositoryFixture
from extension_testkit.testing.resources import DirectoryResourceLookup
from extension_testkit.testing.workspace import allocate_workspace
from extension_testkit.utils.logs import setup_loggers

typer_cli = typer.Typer(
    name="extension-testkit",
    help="Materialize extension repository fixtures on disk, e.g. to debug a failing integration test.",
    no_args_is_help=True,
)

BaseDirOption = Annotated[
    Path | None, typer.Option("--base-dir", help="Folder under which the test-<timestamp> workspace is created.")
]


def _get_settings(base_dir: Path | None) -> TestkitSettings:
    settings = TestkitSettings()
    if base_dir is not None:
        settings = settings.model_copy(update={"WORKSPACE_BASE_DIR": str(base_dir)})
    return settings


@typer_cli.command()
def layout(base_dir: BaseDirOption = None) -> None:
    """Print the folders a new workspace would use, without creating anything."""
    workspace = allocate_workspace(_get_settings(base_dir).workspace_base_path)
    typer.echo(f"root: {workspace.root}")
    for name, path in workspace.sub_paths().items():
        typer.echo(f"{name}: {path}")


@typer_cli.command()
def materialize(
    base_dir: BaseDirOption = None,
    resource_dir: Annotated[
        Path | None,
        typer.Option("--resource-dir", help="Read fixtures from this folder instead of the bundled resources."),
    ] = None,
    log_level: Annotated[str, typer.Option("--log-level")] = "INFO",
) -> None:
    """Run a complete fixture setup and print what was registered."""
    settings = _get_settings(base_dir)
    setup_loggers(log_file=settings.workspace_base_path / "logs.jsonl", level=log_level)

    component_registry = get_component_registry(settings)
    resource_lookup = DirectoryResourceLookup(resource_dir) if resource_dir is not None else None
    fixture = RepositoryFixture(component_registry, settings, resource_lookup=resource_lookup)
    try:
        report = fixture.setup()
    except TestkitError as e:
        logger.error("Fixture setup failed: {}", e)
        raise typer.Exit(code=1) from e

    typer.echo(f"root: {report.workspace.root}")
    for name, path in report.workspace.sub_paths().items():
        typer.echo(f"{name}: {path}")
    typer.echo(f"local fixtures: {report.local.copy_result.file_count}")
    for repository in component_registry.get_instance(ExtensionRepositoryManager).get_repositories():
        descriptor = repository.descriptor
        typer.echo(f"repository: {descriptor.id} ({descriptor.type}) {descriptor.location}")
    for extension_id in report.generated_extensions:
        typer.echo(f"generated: {extension_id}")
    for descriptor in component_registry.get_instance(ExtensionInitializer).get_initialized_extensions():
        typer.echo(f"initialized: {descriptor.extension_id}")


@typer_cli.command()
def initialize(
    permanent_dir: Annotated[
        Path | None, typer.Option("--permanent-dir", help="Permanent directory holding extension/repository.")
    ] = None,
) -> None:
    """Initialize the extensions installed in a standard (non-fixture) environment and print the outcome."""
    settings = TestkitSettings()
    if permanent_dir is not None:
        settings = settings.model_copy(update={"PERMANENT_DIR": str(permanent_dir)})

    component_registry = get_component_registry(settings, is_environment_registered=True)
    initializer = component_registry.get_instance(ExtensionInitializer)
    try:
        initializer.initialize()
    except TestkitError as e:
        logger.error("Extension initialization failed: {}", e)
        raise typer.Exit(code=1) from e

    for descriptor in initializer.get_initialized_extensions():
        typer.echo(f"initialized: {descriptor.extension_id}")
    for extension_id, dependencies in initializer.get_unsatisfied_dependencies().items():
        typer.echo(f"unsatisfied: {extension_id} ({', '.join(dependency.id for dependency in dependencies)})")
