from enum import Enum


class StaffRole(str, Enum):
    """Role names seeded for the floor and kitchen."""
    ADMIN = "admin"
    WAITER = "waiter"
    COOK = "cook"
    BARTENDER = "bartender"
