"""Background workers for the platform credit ledger"""
from .ledger_reconciler import LedgerReconcilerWorker

__all__ = ["LedgerReconcilerWorker"]
