from enum import Enum


class ExecutionAction(str, Enum):
    QUEUE = "queue"
    EXECUTE = "execute"
    CANCEL = "cancel"
