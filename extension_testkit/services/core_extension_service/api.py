from abc import ABC
from abc import abstractmethod

from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.primitives.service import Service


class CoreExtensionRepository(Service, ABC):
    """
    Extensions that are part of the platform itself and are therefore always considered installed.
    """

    @abstractmethod
    def get_core_extensions(self) -> tuple[ExtensionId, ...]: ...

    @abstractmethod
    def get_core_extension(self, extension_id: str) -> ExtensionId:
        """
        Raises:
            ExtensionNotFoundError: if there is no core extension with that id
        """

    def exists(self, extension_id: str) -> bool:
        return any(core_extension.id == extension_id for core_extension in self.get_core_extensions())
