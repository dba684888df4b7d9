from extension_testkit.primitives.errors import TestkitError


class RepositoryError(TestkitError):
    """Errors related to extension repositories."""


class RepositoryAlreadyRegisteredError(RepositoryError):
    """A repository with the same id is already known to the repository manager."""


class RepositoryNotFoundError(RepositoryError, LookupError):
    pass


class UnsupportedRepositoryTypeError(RepositoryError):
    """No repository handle can be built for the descriptor's type tag."""


class ExtensionNotFoundError(RepositoryError, LookupError):
    pass


class InvalidExtensionDescriptorError(RepositoryError):
    """An extension descriptor on disk could not be parsed."""
