from abc import ABC
from abc import abstractmethod
from enum import StrEnum
from pathlib import Path
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

EXTENSION_DESCRIPTOR_FILE_NAME = "extension.json"
# Installed extensions live in <permanent directory>/extension/repository
EXTENSION_FOLDER_NAME = "extension"
LOCAL_REPOSITORY_FOLDER_NAME = "repository"


class RepositoryType(StrEnum):
    MAVEN = "maven"
    FILE = "file"
    LOCAL = "local"


class ExtensionId(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    version: str

    def __str__(self) -> str:
        return f"{self.id}/{self.version}"


class ExtensionDependency(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    # None means any version is acceptable.
    version_constraint: str | None = None

    def is_satisfied_by(self, extension_id: ExtensionId) -> bool:
        if extension_id.id != self.id:
            return False
        return self.version_constraint is None or self.version_constraint == extension_id.version


class ExtensionDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    version: str
    type: str = "jar"
    name: str | None = None
    summary: str | None = None
    dependencies: tuple[ExtensionDependency, ...] = ()
    # Alternative ids this extension also answers to.
    features: tuple[str, ...] = ()

    @property
    def extension_id(self) -> ExtensionId:
        return ExtensionId(id=self.id, version=self.version)


class RepositoryDescriptor(BaseModel):
    """Identity of a repository: a symbolic id, a type tag and a location (filesystem path or URI)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    location: str


class ExtensionRepository(ABC):
    """A handle to a source of extensions, as registered with the repository manager."""

    @property
    @abstractmethod
    def descriptor(self) -> RepositoryDescriptor: ...

    @abstractmethod
    def get_extension_ids(self) -> tuple[ExtensionId, ...]:
        """
        List every extension this repository can resolve.
        """

    @abstractmethod
    def resolve(self, extension_id: ExtensionId) -> ExtensionDescriptor:
        """
        Raises:
            ExtensionNotFoundError: if the repository does not contain the extension
            InvalidExtensionDescriptorError: if the stored descriptor cannot be parsed
        """

    def exists(self, extension_id: ExtensionId) -> bool:
        return extension_id in self.get_extension_ids()


def encode_path_segment(value: str) -> str:
    return quote(value, safe="")


def get_extension_folder(root: Path, extension_id: ExtensionId) -> Path:
    """Folder holding one extension version in the file repository layout."""
    return root / encode_path_segment(extension_id.id) / encode_path_segment(extension_id.version)


def get_extension_archive_name(descriptor: ExtensionDescriptor) -> str:
    return f"{encode_path_segment(descriptor.id)}-{encode_path_segment(descriptor.version)}.{descriptor.type}"


def get_local_repository_path(permanent_directory: Path) -> Path:
    return permanent_directory / EXTENSION_FOLDER_NAME / LOCAL_REPOSITORY_FOLDER_NAME
