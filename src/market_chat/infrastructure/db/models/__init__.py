"""Import all models so Alembic can discover them via Base.metadata."""
from market_chat.infrastructure.db.models.account import AccountModel
from market_chat.infrastructure.db.models.message import MessageModel
from market_chat.infrastructure.db.models.order import OrderModel
from market_chat.infrastructure.db.models.outbox import OutboxMessageModel

__all__ = [
    "AccountModel",
    "MessageModel",
    "OrderModel",
    "OutboxMessageModel",
]
