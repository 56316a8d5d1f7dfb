from .auth import User
from .catalog import Product, Service
from .ledger import Transaction, LedgerImmutableError, T_TYPES, DEBIT, CREDIT

__all__ = [
    'User',
    'Product', 'Service',
    'Transaction', 'LedgerImmutableError', 'T_TYPES', 'DEBIT', 'CREDIT',
]
