class GovernanceError(Exception):
    """Base class for every error raised by the governance core."""


class InputValidationError(GovernanceError):
    """
    A user-supplied field failed validation before encoding.
    Terminal for the current attempt: the user must correct the input.
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class InvalidRecordError(GovernanceError):
    """An externally supplied (indexer) record does not have the expected shape."""

    def __init__(self, record_type: str, message: str):
        super().__init__(f"Invalid {record_type} record: {message}")
        self.record_type = record_type


class PreconditionError(GovernanceError):
    """An operation was attempted while its gating condition does not hold."""


class TransactionInFlightError(PreconditionError):
    """Another transaction for the same proposal has not settled yet."""


class ExternalDependencyError(GovernanceError):
    """
    An external collaborator (wallet, pinning service, simulation provider, indexer)
    failed. Retryable by re-invoking the same operation.
    """


class PinningError(ExternalDependencyError):
    pass


class SimulationError(ExternalDependencyError):
    pass


class ChainError(GovernanceError):
    """A transaction reverted or its confirmation timed out. Retryable."""

    def __init__(self, message: str, tx_hash: str | None = None):
        super().__init__(message)
        self.tx_hash = tx_hash
