"""Exceptions raised by the digest engine."""


class ShaError(Exception):

    def __init__(self, message: str = ""):
        Exception.__init__(self, message)
        self.message = message


class InvalidStateError(ShaError):
    """A context was used after it produced its digest."""


class LengthOverflowError(ShaError):
    """The message is longer than the length field can express.

    The ceiling is 2**64 - 1 bits for SHA-1, SHA-224 and SHA-256 and
    2**128 - 1 bits for SHA-384 and SHA-512.
    """


class UnknownAlgorithmError(ShaError, ValueError):
    pass


class ConfigurationError(ShaError):
    pass
