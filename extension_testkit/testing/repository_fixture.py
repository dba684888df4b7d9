"""Materializes a complete extension repository environment for one test.

`RepositoryFixture.setup` runs these steps in order and stops at the first failure:

1. register the fixture environment (workspace directories) in the component registry
2. register the configurable core extension source and inject the core extensions
3. copy the local repository fixtures (installed extensions)
4. copy the remote repository fixtures and register a file repository if there were any
5. copy the maven repository fixtures and register a maven repository if there were any
6. generate the packaged extensions into the remote repository folder
7. run the extension initializer of the system under test

Nothing is cleaned up afterwards: the workspace stays on disk so that a failing test can be inspected.
"""

from pathlib import Path
from typing import Sequence

from loguru import logger
from pydantic import BaseModel
from pydantic import ConfigDict

from extension_testkit.config.settings import CoreExtensionEntry
from extension_testkit.config.settings import TestkitSettings
from extension_testkit.interfaces.environment.v1.base import Environment
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.base import ExtensionRepository
from extension_testkit.primitives.component_registry import ComponentRegistry
from extension_testkit.primitives.errors import TestkitError
from extension_testkit.services.core_extension_service.api import CoreExtensionRepository
from extension_testkit.services.core_extension_service.configurable_implementation import (
    ConfigurableCoreExtensionRepository,
)
from extension_testkit.services.extension_initializer_service.api import ExtensionInitializer
from extension_testkit.services.repository_service.api import ExtensionRepositoryManager
from extension_testkit.testing.extension_packager import ExtensionPackager
from extension_testkit.testing.fixture_environment import FixtureEnvironment
from extension_testkit.testing.repository_registrar import RepositoryKind
from extension_testkit.testing.repository_registrar import RepositoryRegistrar
from extension_testkit.testing.repository_registrar import RepositoryRegistration
from extension_testkit.testing.resources import PackageResourceLookup
from extension_testkit.testing.resources import ResourceLookup
from extension_testkit.testing.resources import ResourceMaterializer
from extension_testkit.testing.workspace import FixtureWorkspace
from extension_testkit.testing.workspace import allocate_workspace
from extension_testkit.utils.timing import log_runtime


class FixtureAlreadySetUpError(TestkitError):
    pass


class RepositoryFixtureReport(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    workspace: FixtureWorkspace
    core_extensions: tuple[ExtensionId, ...]
    local: RepositoryRegistration
    remote: RepositoryRegistration
    maven: RepositoryRegistration
    generated_extensions: tuple[ExtensionId, ...]


class RepositoryFixture:
    def __init__(
        self,
        component_registry: ComponentRegistry,
        settings: TestkitSettings,
        resource_lookup: ResourceLookup | None = None,
        core_extensions: Sequence[CoreExtensionEntry] | None = None,
        workspace: FixtureWorkspace | None = None,
    ) -> None:
        self.component_registry = component_registry
        self.settings = settings
        self.resource_lookup = resource_lookup or PackageResourceLookup(settings.RESOURCE_ANCHOR)
        self.core_extensions = tuple(core_extensions if core_extensions is not None else settings.CORE_EXTENSIONS)
        self.workspace = workspace or allocate_workspace(settings.workspace_base_path)
        self.materializer = ResourceMaterializer(self.resource_lookup)
        self.extension_packager = ExtensionPackager(
            resource_lookup=self.resource_lookup,
            repository_dir=self.workspace.remote_repository_dir,
            resource_package=settings.PACKAGE_RESOURCE_PACKAGE,
        )
        self._remote_repository: ExtensionRepository | None = None
        self._is_setup_started = False

    def get_permanent_directory(self) -> Path:
        return self.workspace.permanent_dir

    def get_temporary_directory(self) -> Path:
        return self.workspace.temporary_dir

    def get_extension_directory(self) -> Path:
        return self.workspace.extension_dir

    def get_local_repository(self) -> Path:
        return self.workspace.local_repository_dir

    def get_remote_repository(self) -> Path:
        return self.workspace.remote_repository_dir

    def get_maven_repository(self) -> Path:
        return self.workspace.maven_repository_dir

    @property
    def maven_repository_id(self) -> str:
        return self.settings.MAVEN_REPOSITORY_ID

    @property
    def remote_repository_id(self) -> str:
        return self.settings.REMOTE_REPOSITORY_ID

    @property
    def remote_repository(self) -> ExtensionRepository | None:
        """The registered remote file repository, or None if there were no remote fixtures."""
        return self._remote_repository

    def setup(self) -> RepositoryFixtureReport:
        """
        Raises:
            FixtureAlreadySetUpError: if setup was already attempted on this fixture
            ResourceCopyError: if fixture resources could not be copied
            ComponentRegistryError: if a component is already registered or cannot be resolved
            RepositoryError: if a repository cannot be registered
            PackagingError: if a packaged extension descriptor is invalid
        """
        if self._is_setup_started:
            raise FixtureAlreadySetUpError(f"Fixture in {self.workspace.root} was already set up")
        self._is_setup_started = True

        with logger.contextualize(workspace=self.workspace.root.name):
            logger.info("Setting up extension repository fixture in {}", self.workspace.root)

            with log_runtime("FIXTURE.register_environment"):
                self.component_registry.register_instance(Environment, FixtureEnvironment(self.workspace))

            with log_runtime("FIXTURE.register_core_extensions"):
                core_extensions = self._register_core_extensions()

            repository_manager = self.component_registry.get_instance(ExtensionRepositoryManager)
            registrar = RepositoryRegistrar(repository_manager=repository_manager, materializer=self.materializer)

            with log_runtime("FIXTURE.copy_local_repository"):
                local = registrar.register_if_non_empty(
                    RepositoryKind.LOCAL,
                    self.workspace.local_repository_dir,
                    self.settings.LOCAL_RESOURCE_PACKAGE,
                    id_factory=lambda: "local",
                )

            with log_runtime("FIXTURE.register_remote_repository"):
                remote = registrar.register_if_non_empty(
                    RepositoryKind.REMOTE,
                    self.workspace.remote_repository_dir,
                    self.settings.REMOTE_RESOURCE_PACKAGE,
                    id_factory=lambda: self.remote_repository_id,
                )
                self._remote_repository = remote.registered_repository

            with log_runtime("FIXTURE.register_maven_repository"):
                maven = registrar.register_if_non_empty(
                    RepositoryKind.MAVEN,
                    self.workspace.maven_repository_dir,
                    self.settings.MAVEN_RESOURCE_PACKAGE,
                    id_factory=lambda: self.maven_repository_id,
                )

            with log_runtime("FIXTURE.generate_extensions"):
                generated_extensions = self.extension_packager.generate_extensions()

            with log_runtime("FIXTURE.initialize_extensions"):
                self.component_registry.get_instance(ExtensionInitializer).initialize()

            logger.info("Extension repository fixture ready in {}", self.workspace.root)

        return RepositoryFixtureReport(
            workspace=self.workspace,
            core_extensions=core_extensions,
            local=local,
            remote=remote,
            maven=maven,
            generated_extensions=generated_extensions,
        )

    def _register_core_extensions(self) -> tuple[ExtensionId, ...]:
        self.component_registry.register_factory(
            CoreExtensionRepository, lambda _: ConfigurableCoreExtensionRepository()
        )
        core_extension_repository = self.component_registry.get_instance(CoreExtensionRepository)
        assert isinstance(core_extension_repository, ConfigurableCoreExtensionRepository)
        return tuple(
            core_extension_repository.add_extensions(entry.extension_id, entry.version)
            for entry in self.core_extensions
        )
