class GrowthMapError(Exception):
    """Base for every failure raised by the lookup pipeline."""


class NetworkError(GrowthMapError):
    """Request failed at the transport level or came back with a non-success status."""


class FetchError(NetworkError):
    """The growth table could not be fetched."""


class EmptyResultError(GrowthMapError):
    """A geocode or search call matched nothing."""


class MalformedRecordError(GrowthMapError, ValueError):
    """An encoded cell has no usable `_year` value."""


class IncompleteRowError(GrowthMapError, ValueError):
    """A table row is too short to hold a key and an encoded cell."""


class DuplicateKeyError(GrowthMapError, ValueError):
    """Two rows share a `<suburb>_<category>` key under the `error` policy."""
