from loguru import logger
from pydantic import PrivateAttr

from extension_testkit.interfaces.extensions.v1.base import ExtensionId
from extension_testkit.interfaces.extensions.v1.errors import ExtensionNotFoundError
from extension_testkit.services.core_extension_service.api import CoreExtensionRepository


class ConfigurableCoreExtensionRepository(CoreExtensionRepository):
    """A core extension source whose content is injected by tests instead of discovered."""

    _extensions: dict[str, ExtensionId] = PrivateAttr(default_factory=dict)

    def add_extensions(self, extension_id: str, version: str) -> ExtensionId:
        core_extension = ExtensionId(id=extension_id, version=version)
        # the latest injected version wins, as there can only be one core version of an extension
        self._extensions[extension_id] = core_extension
        logger.debug("Added core extension {}", core_extension)
        return core_extension

    def get_core_extensions(self) -> tuple[ExtensionId, ...]:
        return tuple(self._extensions.values())

    def get_core_extension(self, extension_id: str) -> ExtensionId:
        try:
            return self._extensions[extension_id]
        except KeyError as e:
            raise ExtensionNotFoundError(f"No core extension with id {extension_id}") from e
