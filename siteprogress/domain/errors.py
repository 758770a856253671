"""Domain exceptions"""


class SiteProgressError(Exception):
    """Base exception for site progress aggregation"""

    pass


class TaskFetchError(SiteProgressError):
    """Reading task records failed (Firestore etc.)"""

    pass


class BoqFetchError(SiteProgressError):
    """Reading BOQ documents failed"""

    pass


class ReadTimeoutError(SiteProgressError):
    """A store read did not finish within the configured timeout"""

    pass
