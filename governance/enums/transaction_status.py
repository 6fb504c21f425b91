from enum import Enum


class TransactionStatus(str, Enum):
    NOT_SUBMITTED = "not_submitted"
    AWAITING_SIGNATURE = "awaiting_signature"  # request sent to the wallet
    SUBMITTED = "submitted"                    # broadcast, waiting for the receipt
    CONFIRMED = "confirmed"
    FAILED = "failed"


IN_FLIGHT_STATUSES = frozenset({TransactionStatus.AWAITING_SIGNATURE, TransactionStatus.SUBMITTED})
