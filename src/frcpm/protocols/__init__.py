"""Protocol definitions for the pluggable seams of FRCPM."""

from frcpm.protocols.dispatcher import InteractiveDispatcher
from frcpm.protocols.executor import Executor, FailureCallback, SuccessCallback
from frcpm.protocols.persistence import PersistenceProvider, TransactionalHandle

__all__ = [
    "Executor",
    "FailureCallback",
    "InteractiveDispatcher",
    "PersistenceProvider",
    "SuccessCallback",
    "TransactionalHandle",
]
