"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AccountNotFoundError(DomainException):
    """No account exists with the given identifier"""

    pass


class ConsumerNotFoundError(AccountNotFoundError):
    """Consumer profile missing at report assembly time"""

    pass


class AccountExistsError(DomainException):
    """An account with the same mobile number or PAN is already registered"""

    pass


class NotAPartnerError(DomainException):
    """Wallet operation attempted on an account without a ledger balance"""

    pass


class InvalidAmountError(DomainException):
    """Monetary amount is zero or negative"""

    pass


class EmptyBureauSelectionError(DomainException):
    """A purchase or quote was requested without any bureau"""

    pass


class ReportNotFoundError(DomainException):
    """No credit report exists with the given identifier"""

    pass


class RevisionConflictError(DomainException):
    """Another writer already stored this (consumer, bureau, revision)"""

    pass
