"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DataIntegrityError(DomainException):
    """Split data violates the ledger's conservation or membership invariants"""

    pass


class PrecisionOverflowError(DomainException):
    """Amount cannot be represented at ledger precision"""

    pass
