from .ledger import CommissionLedger
from .storage import (
    CommissionStorage,
    InMemoryCommissionStorage,
    JsonFileCommissionStorage,
    SqlCommissionStorage,
    get_commission_storage,
)
