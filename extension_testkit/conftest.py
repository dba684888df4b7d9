import json
from pathlib import Path
from typing import Generator

import pytest

from extension_testkit.config.settings import TestkitSettings
from extension_testkit.primitives.component_registry import ComponentRegistry
from extension_testkit.service_collections.service_collection import get_component_registry
from extension_testkit.testing.repository_fixture import RepositoryFixture
from extension_testkit.testing.resource_tree import write_resource_tree
from extension_testkit.testing.resources import DirectoryResourceLookup
from extension_testkit.utils.logs import setup_default_test_logging

MAVEN_POM = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>org.example</groupId>
  <artifactId>maven-extension</artifactId>
  <version>1.0</version>
  <name>Maven extension</name>
</project>
"""


def pytest_configure(config: pytest.Config) -> None:
    setup_default_test_logging()


def _extension_json(extension_id: str, version: str, dependencies: list[dict] | None = None) -> str:
    return json.dumps({"id": extension_id, "version": version, "dependencies": dependencies or []})


@pytest.fixture
def test_settings(tmp_path: Path) -> TestkitSettings:
    return TestkitSettings(
        WORKSPACE_BASE_DIR=str(tmp_path / "workspaces"),
        PERMANENT_DIR=str(tmp_path / "permanent"),
        TEMPORARY_DIR=str(tmp_path / "temporary"),
    )


@pytest.fixture
def test_component_registry(test_settings: TestkitSettings) -> Generator[ComponentRegistry, None, None]:
    component_registry = get_component_registry(test_settings)
    yield component_registry
    component_registry.stop_all()


@pytest.fixture
def scenario_resource_dir(tmp_path: Path) -> Path:
    """Two local fixture files, no remote fixtures, one maven fixture file, no packaged extensions."""
    return write_resource_tree(
        tmp_path / "resources",
        {
            "repository/local/first/1.0/extension.json": _extension_json("first", "1.0"),
            "repository/local/second/2.0/extension.json": _extension_json(
                "second", "2.0", [{"id": "first", "version_constraint": "1.0"}]
            ),
            "repository/maven/org/example/maven-extension/1.0/maven-extension-1.0.pom": MAVEN_POM,
        },
    )


@pytest.fixture
def remote_resource_dir(scenario_resource_dir: Path) -> Path:
    """The scenario resources plus one remote extension."""
    return write_resource_tree(
        scenario_resource_dir,
        {"repository/remote/remote/3.0/extension.json": _extension_json("remote", "3.0")},
    )


@pytest.fixture
def test_repository_fixture(
    test_component_registry: ComponentRegistry, test_settings: TestkitSettings, scenario_resource_dir: Path
) -> RepositoryFixture:
    return RepositoryFixture(
        test_component_registry, test_settings, resource_lookup=DirectoryResourceLookup(scenario_resource_dir)
    )
