from __future__ import annotations

from market_chat.domain.entities.account import Account
from market_chat.domain.entities.order import OrderRef
from market_chat.infrastructure.db.models.account import AccountModel
from market_chat.infrastructure.db.models.order import OrderModel


def account_to_entity(model: AccountModel) -> Account:
    return Account(id=model.id, name=model.name, image=model.image, online=model.online)


def order_to_entity(model: OrderModel) -> OrderRef:
    return OrderRef(id=model.id, order_number=model.order_number, title=model.title)
