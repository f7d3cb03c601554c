from .inventory import (
    Product,
    Transaction,
    TransactionType,
    REDUCING_TYPES,
    INCREASING_TYPES,
    reduces_stock,
    increases_stock,
    parse_transaction_type,
)

__all__ = [
    'Product', 'Transaction', 'TransactionType',
    'REDUCING_TYPES', 'INCREASING_TYPES',
    'reduces_stock', 'increases_stock', 'parse_transaction_type',
]
