from __future__ import annotations


class TabSplitError(ValueError):
    pass


class AmountError(TabSplitError):
    """Malformed or out-of-range user amount. Messages are safe to show to users."""


class InvalidFormatError(AmountError):
    pass


class InvalidAmountError(AmountError):
    pass


class NonPositiveAmountError(AmountError):
    pass


class PreconditionError(TabSplitError):
    """The caller broke a contract of the core."""


class EmptyParticipantSetError(PreconditionError):
    pass


class InvalidSplitError(PreconditionError):
    pass


class SplitMismatchError(PreconditionError):
    def __init__(self, expected_cents: int, actual_cents: int) -> None:
        super().__init__(f"Split amounts must equal total: expected {expected_cents}, got {actual_cents}")
        self.expected_cents = expected_cents
        self.actual_cents = actual_cents


class SettlementImbalanceError(PreconditionError):
    def __init__(self, leftover_cents: int) -> None:
        super().__init__(f"Settlement nets do not balance to zero (off by {leftover_cents})")
        self.leftover_cents = leftover_cents
