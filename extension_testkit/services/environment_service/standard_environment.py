from pathlib import Path

from extension_testkit.config.settings import TestkitSettings
from extension_testkit.interfaces.environment.v1.base import Environment


class StandardEnvironment(Environment):
    def __init__(self, permanent_directory: Path, temporary_directory: Path) -> None:
        self._permanent_directory = permanent_directory
        self._temporary_directory = temporary_directory

    def get_permanent_directory(self) -> Path:
        return self._permanent_directory

    def get_temporary_directory(self) -> Path:
        return self._temporary_directory


def build_standard_environment(settings: TestkitSettings) -> StandardEnvironment:
    return StandardEnvironment(
        permanent_directory=Path(settings.PERMANENT_DIR),
        temporary_directory=Path(settings.TEMPORARY_DIR),
    )
