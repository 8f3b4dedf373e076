from enum import Enum


class OrderStatus(str, Enum):
    WAITING = "waiting"
    COMPLETED = "completed"


class OrderItemKind(str, Enum):
    """Which line handles the item: dishes go to the kitchen, drinks to the bar."""
    DISH = "dish"
    DRINK = "drink"


class OrderItemState(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    PREPARING = "preparing"
    READY = "ready"


# States that count against a cook's capacity
OPEN_ITEM_STATES = (OrderItemState.ASSIGNED, OrderItemState.PREPARING)
