from abc import ABC
from abc import abstractmethod
from pathlib import Path


class Environment(ABC):
    """
    The host runtime environment, as seen by the extension system.

    Only the two directories the extension system needs are exposed:
    the permanent directory holds installed extensions, the temporary directory holds scratch files.
    """

    @abstractmethod
    def get_permanent_directory(self) -> Path: ...

    @abstractmethod
    def get_temporary_directory(self) -> Path: ...
