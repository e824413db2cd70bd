"""Transaction service clients."""

from checkout_orchestrator.clients.base import TransactionService
from checkout_orchestrator.clients.transaction_client import HttpTransactionService

__all__ = ["TransactionService", "HttpTransactionService"]
