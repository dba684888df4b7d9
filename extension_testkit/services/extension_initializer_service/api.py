from abc import ABC
from abc import abstractmethod

from extension_testkit.interfaces.extensions.v1.base import ExtensionDependency
from extension_testkit.interfaces.extensions.v1.base import ExtensionDescriptor
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.primitives.service import Service


class ExtensionInitializer(Service, ABC):
    @abstractmethod
    def initialize(self) -> None:
        """
        Discover the installed extensions and initialize the ones whose dependencies are satisfied.

        Must only be called once the environment and the repositories are in place.
        """

    @abstractmethod
    def get_initialized_extensions(self) -> tuple[ExtensionDescriptor, ...]: ...

    @abstractmethod
    def get_unsatisfied_dependencies(self) -> dict[ExtensionId, tuple[ExtensionDependency, ...]]:
        """Installed extensions that were not initialized, with the dependencies that were missing."""
