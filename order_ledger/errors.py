class LedgerError(Exception):
    """Base class for order ledger failures."""


class ValidationError(LedgerError):
    pass


class NotFoundError(LedgerError):
    pass


class InsufficientBalanceError(LedgerError):
    pass


class PaymentFailedError(LedgerError):
    pass


class TransactionFailure(LedgerError):
    """Store-level failure inside a transaction; the transaction was rolled back."""
