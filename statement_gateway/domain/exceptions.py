"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MalformedAmountError(DomainException):
    """Currency amount string cannot be split into a currency and a decimal magnitude"""

    pass


class PersistenceError(DomainException):
    """Transaction store is unavailable or rejected the write"""

    pass


class RateProviderError(DomainException):
    """Rate provider is unreachable or returned an unusable quote"""

    pass
