from pathlib import Path
from tempfile import gettempdir
from typing import Final

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_WORKSPACE_BASE_DIR: Path = Path(gettempdir()) / "extension_testkit"
DEFAULT_RESOURCE_ANCHOR: Final[str] = "extension_testkit.testing.fixture_resources"
DEFAULT_MAVEN_REPOSITORY_ID: Final[str] = "test-maven"
DEFAULT_REMOTE_REPOSITORY_ID: Final[str] = "test-remote"

TEST_LOG_PATH: Path = Path(gettempdir()) / "extension_testkit_test_logs"


# NOTE: the settings keys are all-caps in order to be grep-friendly
# (when looking for places where they're being set, e.g. via environment variables).


class CoreExtensionEntry(BaseModel):
    """An (id, version) pair that the core extension source reports as always present."""

    model_config = ConfigDict(frozen=True)

    extension_id: str
    version: str


DEFAULT_CORE_EXTENSIONS: Final[tuple[CoreExtensionEntry, ...]] = (
    CoreExtensionEntry(extension_id="coreextension", version="version"),
)


class TestkitSettings(BaseSettings):
    model_config = SettingsConfigDict(frozen=True, env_prefix="EXTENSION_TESTKIT_", env_nested_delimiter="__")

    __test__ = False

    WORKSPACE_BASE_DIR: str = str(DEFAULT_WORKSPACE_BASE_DIR)
    LOG_LEVEL: str = "DEBUG"

    # Resources are looked up relative to this importable package.
    RESOURCE_ANCHOR: str = DEFAULT_RESOURCE_ANCHOR
    LOCAL_RESOURCE_PACKAGE: str = "repository.local"
    REMOTE_RESOURCE_PACKAGE: str = "repository.remote"
    MAVEN_RESOURCE_PACKAGE: str = "repository.maven"
    PACKAGE_RESOURCE_PACKAGE: str = "packagefile"

    MAVEN_REPOSITORY_ID: str = DEFAULT_MAVEN_REPOSITORY_ID
    REMOTE_REPOSITORY_ID: str = DEFAULT_REMOTE_REPOSITORY_ID
    CORE_EXTENSIONS: tuple[CoreExtensionEntry, ...] = DEFAULT_CORE_EXTENSIONS

    # Only used by the standard (non-fixture) environment.
    PERMANENT_DIR: str = str(Path(gettempdir()) / "extension_testkit_permanent")
    TEMPORARY_DIR: str = str(Path(gettempdir()) / "extension_testkit_temporary")

    @property
    def workspace_base_path(self) -> Path:
        return Path(self.WORKSPACE_BASE_DIR)

    @field_validator(
        "LOCAL_RESOURCE_PACKAGE",
        "REMOTE_RESOURCE_PACKAGE",
        "MAVEN_RESOURCE_PACKAGE",
        "PACKAGE_RESOURCE_PACKAGE",
        "MAVEN_REPOSITORY_ID",
        "REMOTE_REPOSITORY_ID",
    )
    def must_not_be_blank(cls, value: str) -> str:
        if value.strip() == "":
            # This will be wrapped by pydantic into a ValidationError.
            raise ValueError("value must not be blank")
        return value

    @field_validator("RESOURCE_ANCHOR")
    def must_be_dotted_module_name(cls, value: str) -> str:
        if not all(part.isidentifier() for part in value.split(".")):
            raise ValueError(f"resource anchor must be an importable package name, got {value!r}")
        return value


# Think twice before using TestkitSettings() directly in library code. Settings should be injected,
# either through the fixture constructor or through the component registry wiring.
