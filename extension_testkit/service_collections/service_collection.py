from extension_testkit.config.settings import TestkitSettings
from extension_testkit.interfaces.environment.v1.base import Environment
from extension_testkit.primitives.component_registry import ComponentRegistry
from extension_testkit.services.environment_service.standard_environment import build_standard_environment
from extension_testkit.services.extension_initializer_service.api import ExtensionInitializer
from extension_testkit.services.extension_initializer_service.default_implementation import (
    DefaultExtensionInitializer,
)
from extension_testkit.services.repository_service.api import ExtensionRepositoryManager
from extension_testkit.services.repository_service.default_implementation import DefaultExtensionRepositoryManager


def get_component_registry(settings: TestkitSettings, is_environment_registered: bool = False) -> ComponentRegistry:
    """
    Build a registry with the default extension services.

    Test fixtures register their own environment, so the standard environment is only
    registered when asked for.
    """
    component_registry = ComponentRegistry()
    component_registry.register_instance(TestkitSettings, settings)
    component_registry.register_factory(ExtensionRepositoryManager, lambda _: DefaultExtensionRepositoryManager())
    component_registry.register_factory(
        ExtensionInitializer, lambda registry: DefaultExtensionInitializer(component_registry=registry)
    )
    if is_environment_registered:
        component_registry.register_instance(Environment, build_standard_environment(settings))
    return component_registry
