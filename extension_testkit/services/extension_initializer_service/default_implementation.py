from loguru import logger
from pydantic import PrivateAttr

from extension_testkit.interfaces.environment.v1.base import Environment
from extension_testkit.interfaces.extensions.v1.base import ExtensionDependency
from extension_testkit.interfaces.extensions.v1.base import ExtensionDescriptor
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.base import get_local_repository_path
from extension_testkit.primitives.component_registry import ComponentRegistry
from extension_testkit.services.core_extension_service.api import CoreExtensionRepository
from extension_testkit.services.extension_initializer_service.api import ExtensionInitializer
from extension_testkit.services.repository_service.repositories.file_repository import LocalExtensionRepository


class DefaultExtensionInitializer(ExtensionInitializer):
    """
    Loads the installed extensions from the local repository.

    An installed extension only satisfies a dependency if it is initialized itself, so an extension
    whose dependencies are missing also takes down every extension that depends on it.

    Collaborators are looked up in the component registry when `initialize` runs, not when the
    initializer is built, so the environment may be registered after the initializer.
    """

    component_registry: ComponentRegistry

    _initialized_extensions: tuple[ExtensionDescriptor, ...] = PrivateAttr(default=())
    _unsatisfied_dependencies: dict[ExtensionId, tuple[ExtensionDependency, ...]] = PrivateAttr(default_factory=dict)
    _local_repository: LocalExtensionRepository | None = PrivateAttr(default=None)

    def initialize(self) -> None:
        environment = self.component_registry.get_instance(Environment)
        local_repository = LocalExtensionRepository(get_local_repository_path(environment.get_permanent_directory()))
        core_extensions = self._get_core_extensions()

        installed = tuple(
            local_repository.resolve(extension_id) for extension_id in local_repository.get_extension_ids()
        )
        logger.info("Found {} installed extension(s) in {}", len(installed), local_repository.root)

        # drop extensions with missing dependencies until the remaining set is closed
        initialized = list(installed)
        unsatisfied_dependencies: dict[ExtensionId, tuple[ExtensionDependency, ...]] = {}
        is_changed = True
        while is_changed:
            is_changed = False
            for descriptor in tuple(initialized):
                missing = tuple(
                    dependency
                    for dependency in descriptor.dependencies
                    if not _is_dependency_available(dependency, core_extensions, tuple(initialized))
                )
                if missing:
                    logger.warning(
                        "Not initializing extension {}: unsatisfied dependencies {}",
                        descriptor.extension_id,
                        ", ".join(dependency.id for dependency in missing),
                    )
                    unsatisfied_dependencies[descriptor.extension_id] = missing
                    initialized.remove(descriptor)
                    is_changed = True

        self._local_repository = local_repository
        self._initialized_extensions = tuple(initialized)
        self._unsatisfied_dependencies = unsatisfied_dependencies
        logger.info("Initialized {} extension(s)", len(initialized))

    def get_initialized_extensions(self) -> tuple[ExtensionDescriptor, ...]:
        return self._initialized_extensions

    def get_unsatisfied_dependencies(self) -> dict[ExtensionId, tuple[ExtensionDependency, ...]]:
        return dict(self._unsatisfied_dependencies)

    def get_local_repository(self) -> LocalExtensionRepository | None:
        return self._local_repository

    def _get_core_extensions(self) -> tuple[ExtensionId, ...]:
        if not self.component_registry.has_component(CoreExtensionRepository):
            return ()
        return self.component_registry.get_instance(CoreExtensionRepository).get_core_extensions()


def _is_dependency_available(
    dependency: ExtensionDependency,
    core_extensions: tuple[ExtensionId, ...],
    installed: tuple[ExtensionDescriptor, ...],
) -> bool:
    if any(dependency.is_satisfied_by(core_extension) for core_extension in core_extensions):
        return True
    for descriptor in installed:
        if dependency.is_satisfied_by(descriptor.extension_id):
            return True
        # features are satisfied regardless of version
        if dependency.id in descriptor.features:
            return True
    return False
