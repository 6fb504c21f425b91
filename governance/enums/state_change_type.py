from enum import Enum


class StateChangeType(str, Enum):
    BALANCE = "balance"
    STORAGE = "storage"
    MANAGER = "manager"
    TRANSFER = "transfer"
