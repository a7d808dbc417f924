from decimal import Decimal


class ProgressError(ValueError):
    """Base class for every error raised by the calculation layer."""


class InvalidTargetError(ProgressError):
    pass


class InvalidGoalError(ProgressError):
    pass


class InvalidAmountError(ProgressError):
    pass


class InsufficientFundsError(ProgressError):
    def __init__(self, amount: Decimal, available: Decimal):
        super().__init__(
            f"Cannot withdraw {amount:,.2f}: only {available:,.2f} available"
        )
        self.amount = amount
        self.available = available


class InvalidCategoryError(ProgressError):
    pass


class InvalidTransactionError(ProgressError):
    """Raised when boundary validation of a transaction fails.

    `details` is the error dict produced by the validator.
    """

    def __init__(self, details: dict):
        super().__init__(details.get("message", details.get("error", "invalid transaction")))
        self.details = details
