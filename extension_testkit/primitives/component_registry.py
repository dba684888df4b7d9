"""A deliberately small component registry.

Components are registered under a role type (usually an abstract base class) and a role hint.
They are either registered as ready-made instances or as factories that receive the registry
and are instantiated lazily, on first lookup, so that they can resolve their own dependencies.
"""

import threading
from typing import Any
from typing import Callable
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import PrivateAttr

from extension_testkit.primitives.errors import TestkitError
from extension_testkit.primitives.service import Service

T = TypeVar("T")

DEFAULT_ROLE_HINT = "default"


class ComponentRegistryError(TestkitError):
    pass


class ComponentAlreadyRegisteredError(ComponentRegistryError):
    pass


class ComponentLookupError(ComponentRegistryError, LookupError):
    pass


class ComponentDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    role_type: type
    role_hint: str = DEFAULT_ROLE_HINT
    factory: Callable[["ComponentRegistry"], Any] | None = None

    @property
    def key(self) -> tuple[type, str]:
        return self.role_type, self.role_hint


class ComponentRegistry(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    _descriptors: dict[tuple[type, str], ComponentDescriptor] = PrivateAttr(default_factory=dict)
    _instances: dict[tuple[type, str], Any] = PrivateAttr(default_factory=dict)
    _lock: threading.RLock = PrivateAttr(default_factory=threading.RLock)

    def register_component(self, descriptor: ComponentDescriptor, instance: Any | None = None) -> None:
        """
        Register a component under the descriptor's role.

        Either `instance` or `descriptor.factory` must be provided.

        Raises:
            ComponentAlreadyRegisteredError: if something is already registered for that role and hint
        """
        if instance is None and descriptor.factory is None:
            raise ComponentRegistryError(f"Component {_format_key(descriptor.key)} has neither instance nor factory")
        if instance is not None and not isinstance(instance, descriptor.role_type):
            raise ComponentRegistryError(
                f"Instance of {type(instance).__name__} does not implement {descriptor.role_type.__name__}"
            )
        with self._lock:
            if descriptor.key in self._descriptors:
                raise ComponentAlreadyRegisteredError(f"Component {_format_key(descriptor.key)} is already registered")
            self._descriptors[descriptor.key] = descriptor
            if instance is not None:
                self._instances[descriptor.key] = instance
        logger.debug("Registered component {}", _format_key(descriptor.key))

    def register_factory(
        self, role_type: type[T], factory: Callable[["ComponentRegistry"], T], role_hint: str = DEFAULT_ROLE_HINT
    ) -> None:
        self.register_component(ComponentDescriptor(role_type=role_type, role_hint=role_hint, factory=factory))

    def register_instance(self, role_type: type[T], instance: T, role_hint: str = DEFAULT_ROLE_HINT) -> None:
        self.register_component(ComponentDescriptor(role_type=role_type, role_hint=role_hint), instance)

    def has_component(self, role_type: type, role_hint: str = DEFAULT_ROLE_HINT) -> bool:
        with self._lock:
            return (role_type, role_hint) in self._descriptors

    def get_instance(self, role_type: type[T], role_hint: str = DEFAULT_ROLE_HINT) -> T:
        """
        Return the component registered for the role, instantiating it on first use.

        Raises:
            ComponentLookupError: if nothing is registered for that role and hint
        """
        key = (role_type, role_hint)
        with self._lock:
            if key in self._instances:
                return self._instances[key]
            descriptor = self._descriptors.get(key)
            if descriptor is None:
                raise ComponentLookupError(f"No component registered for {_format_key(key)}")
            assert descriptor.factory is not None
            instance = descriptor.factory(self)
            if isinstance(instance, Service):
                instance.start()
            self._instances[key] = instance
            logger.trace("Instantiated component {} as {}", _format_key(key), type(instance).__name__)
            return instance

    def stop_all(self) -> None:
        with self._lock:
            instances = list(self._instances.values())
        for instance in reversed(instances):
            if isinstance(instance, Service):
                instance.stop()


def _format_key(key: tuple[type, str]) -> str:
    role_type, role_hint = key
    return f"{role_type.__name__}/{role_hint}"
