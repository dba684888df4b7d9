class TestkitError(Exception):
    """Base class for every error raised by the testkit.

    These are expected failures: a fixture that cannot be set up should fail its test loudly.
    """

    __test__ = False
