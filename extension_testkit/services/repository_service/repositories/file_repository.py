from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from extension_testkit.interfaces.extensions.v1.base import EXTENSION_DESCRIPTOR_FILE_NAME
from extension_testkit.interfaces.extensions.v1.base import ExtensionDescriptor
from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.base import ExtensionRepository
from extension_testkit.interfaces.extensions.v1.base import RepositoryDescriptor
from extension_testkit.interfaces.extensions.v1.base import RepositoryType
from extension_testkit.interfaces.extensions.v1.base import get_extension_archive_name
from extension_testkit.interfaces.extensions.v1.base import get_extension_folder
from extension_testkit.interfaces.extensions.v1.errors import ExtensionNotFoundError
from extension_testkit.interfaces.extensions.v1.errors import InvalidExtensionDescriptorError


class FileExtensionRepository(ExtensionRepository):
    """
    A lightweight repository stored as plain files:

        <root>/<quoted id>/<quoted version>/extension.json
        <root>/<quoted id>/<quoted version>/<quoted id>-<quoted version>.<type>

    The folder is read on every call, so extensions written after registration are visible.
    """

    def __init__(self, root: Path, repository_id: str, repository_type: str = RepositoryType.FILE) -> None:
        self.root = root
        self._descriptor = RepositoryDescriptor(id=repository_id, type=repository_type, location=str(root))

    @property
    def descriptor(self) -> RepositoryDescriptor:
        return self._descriptor

    def get_extension_ids(self) -> tuple[ExtensionId, ...]:
        """
        Raises:
            InvalidExtensionDescriptorError: if a descriptor is unreadable or lies outside the folder its id maps to
        """
        if not self.root.is_dir():
            return ()
        extension_ids = []
        for descriptor_path in sorted(self.root.glob(f"*/*/{EXTENSION_DESCRIPTOR_FILE_NAME}")):
            extension_id = _read_descriptor(descriptor_path).extension_id
            # every listed id must resolve, so the folder names have to be the quoted id and version
            if self._get_descriptor_path(extension_id) != descriptor_path:
                raise InvalidExtensionDescriptorError(
                    f"Extension {extension_id} at {descriptor_path} is not stored under "
                    f"{get_extension_folder(self.root, extension_id)}"
                )
            extension_ids.append(extension_id)
        return tuple(extension_ids)

    def exists(self, extension_id: ExtensionId) -> bool:
        return self._get_descriptor_path(extension_id).is_file()

    def resolve(self, extension_id: ExtensionId) -> ExtensionDescriptor:
        descriptor_path = self._get_descriptor_path(extension_id)
        if not descriptor_path.is_file():
            raise ExtensionNotFoundError(f"Extension {extension_id} not found in repository {self.descriptor.id}")
        return _read_descriptor(descriptor_path)

    def get_archive_path(self, extension_id: ExtensionId) -> Path | None:
        descriptor = self.resolve(extension_id)
        archive_path = get_extension_folder(self.root, extension_id) / get_extension_archive_name(descriptor)
        return archive_path if archive_path.is_file() else None

    def _get_descriptor_path(self, extension_id: ExtensionId) -> Path:
        return get_extension_folder(self.root, extension_id) / EXTENSION_DESCRIPTOR_FILE_NAME


class LocalExtensionRepository(FileExtensionRepository):
    """The store of installed extensions, kept under the environment's permanent directory."""

    def __init__(self, root: Path, repository_id: str = "local") -> None:
        super().__init__(root=root, repository_id=repository_id, repository_type=RepositoryType.LOCAL)


def _read_descriptor(descriptor_path: Path) -> ExtensionDescriptor:
    try:
        return ExtensionDescriptor.model_validate_json(descriptor_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        logger.debug("Failed to parse extension descriptor {}: {}", descriptor_path, e)
        raise InvalidExtensionDescriptorError(f"Invalid extension descriptor at {descriptor_path}") from e
