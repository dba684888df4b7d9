from abc import ABC
from abc import abstractmethod

from extension_testkit.interfaces.extensions.v1.base import ExtensionDescriptor
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.base import ExtensionRepository
from extension_testkit.interfaces.extensions.v1.base import RepositoryDescriptor
from extension_testkit.primitives.service import Service


class ExtensionRepositoryManager(Service, ABC):
    """
    Keeps track of the repositories the extension system can resolve extensions from.

    Repositories are consulted in the order they were added.
    """

    @abstractmethod
    def add_repository(self, repository: ExtensionRepository | RepositoryDescriptor) -> ExtensionRepository:
        """
        Register a repository handle, or build one from a descriptor and register it.

        Raises:
            RepositoryAlreadyRegisteredError: if a repository with the same id is already registered
            UnsupportedRepositoryTypeError: if no handle can be built for the descriptor's type
        """

    @abstractmethod
    def get_repository(self, repository_id: str) -> ExtensionRepository:
        """
        Raises:
            RepositoryNotFoundError: if no repository with that id is registered
        """

    @abstractmethod
    def get_repositories(self) -> tuple[ExtensionRepository, ...]: ...

    @abstractmethod
    def remove_repository(self, repository_id: str) -> None:
        """
        Raises:
            RepositoryNotFoundError: if no repository with that id is registered
        """

    @abstractmethod
    def resolve(self, extension_id: ExtensionId) -> ExtensionDescriptor:
        """
        Resolve an extension from the first repository that contains it.

        Raises:
            ExtensionNotFoundError: if no registered repository contains the extension
        """
