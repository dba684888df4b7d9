from loguru import logger
from pydantic import PrivateAttr

from extension_testkit.interfaces.extensions.v1.base import ExtensionDescriptor
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.base import ExtensionRepository
from extension_testkit.interfaces.extensions.v1.base import RepositoryDescriptor
from extension_testkit.interfaces.extensions.v1.base import RepositoryType
from extension_testkit.interfaces.extensions.v1.errors import ExtensionNotFoundError
from extension_testkit.interfaces.extensions.v1.errors import RepositoryAlreadyRegisteredError
from extension_testkit.interfaces.extensions.v1.errors import RepositoryNotFoundError
from extension_testkit.interfaces.extensions.v1.errors import UnsupportedRepositoryTypeError
from extension_testkit.services.repository_service.api import ExtensionRepositoryManager
from extension_testkit.services.repository_service.repositories.file_repository import FileExtensionRepository
from extension_testkit.services.repository_service.repositories.file_repository import LocalExtensionRepository
from extension_testkit.services.repository_service.repositories.maven_repository import MavenExtensionRepository
from extension_testkit.services.repository_service.repositories.maven_repository import location_to_path


class DefaultExtensionRepositoryManager(ExtensionRepositoryManager):
    _repositories: dict[str, ExtensionRepository] = PrivateAttr(default_factory=dict)

    def add_repository(self, repository: ExtensionRepository | RepositoryDescriptor) -> ExtensionRepository:
        if isinstance(repository, RepositoryDescriptor):
            repository = build_repository(repository)
        repository_id = repository.descriptor.id
        if repository_id in self._repositories:
            raise RepositoryAlreadyRegisteredError(f"Repository {repository_id} is already registered")
        self._repositories[repository_id] = repository
        logger.info(
            "Added {} repository {} at {}",
            repository.descriptor.type,
            repository_id,
            repository.descriptor.location,
        )
        return repository

    def get_repository(self, repository_id: str) -> ExtensionRepository:
        try:
            return self._repositories[repository_id]
        except KeyError as e:
            raise RepositoryNotFoundError(f"No repository registered with id {repository_id}") from e

    def get_repositories(self) -> tuple[ExtensionRepository, ...]:
        return tuple(self._repositories.values())

    def remove_repository(self, repository_id: str) -> None:
        if repository_id not in self._repositories:
            raise RepositoryNotFoundError(f"No repository registered with id {repository_id}")
        del self._repositories[repository_id]
        logger.info("Removed repository {}", repository_id)

    def resolve(self, extension_id: ExtensionId) -> ExtensionDescriptor:
        for repository in self._repositories.values():
            if repository.exists(extension_id):
                return repository.resolve(extension_id)
        raise ExtensionNotFoundError(f"Extension {extension_id} not found in any registered repository")


def build_repository(descriptor: RepositoryDescriptor) -> ExtensionRepository:
    match descriptor.type:
        case RepositoryType.MAVEN:
            return MavenExtensionRepository(descriptor)
        case RepositoryType.FILE:
            return FileExtensionRepository(root=location_to_path(descriptor.location), repository_id=descriptor.id)
        case RepositoryType.LOCAL:
            return LocalExtensionRepository(root=location_to_path(descriptor.location), repository_id=descriptor.id)
        case _:
            raise UnsupportedRepositoryTypeError(
                f"Unsupported repository type {descriptor.type!r} for repository {descriptor.id}"
            )
