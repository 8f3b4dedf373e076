# backend/modules/kitchen/tests/test_kitchen_service.py

"""
Tests for cook-facing kitchen operations.
"""

import pytest
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError, PermissionError, ValidationError
from modules.kitchen.models.kitchen_models import KitchenCook
from modules.kitchen.services.assignment_service import KitchenAssignmentService
from modules.kitchen.services.kitchen_service import KitchenService
from modules.orders.enums.order_enums import OrderItemKind, OrderItemState
from modules.orders.models.order_models import OrderItem
from modules.staff.enums.staff_enums import StaffRole
from tests.factories import (
    KitchenCookFactory,
    OrderFactory,
    OrderItemFactory,
    StaffMemberFactory,
)


def _assign(cook_id, state=OrderItemState.ASSIGNED, minutes=0, **kwargs):
    at = datetime(2025, 1, 1, 12, 0) + timedelta(minutes=minutes)
    return OrderItemFactory(cook_id=cook_id, state=state, assigned_at=at, created_at=at, **kwargs)


@pytest.fixture
def service(db_session: Session):
    return KitchenService(db_session)


class TestRoster:
    def test_activate_creates_roster_entry(self, db_session, service):
        cook = StaffMemberFactory()

        entry = service.activate_cook(cook.id)

        assert entry.cook_id == cook.id
        assert entry.is_active is True
        assert entry.last_seen_at is not None
        assert db_session.query(KitchenCook).count() == 1

    def test_activate_reuses_entry(self, db_session, service):
        entry = KitchenCookFactory(is_active=False)

        service.activate_cook(entry.cook_id)
        service.activate_cook(entry.cook_id)

        assert db_session.query(KitchenCook).count() == 1
        db_session.refresh(entry)
        assert entry.is_active is True

    def test_activate_hands_out_pooled_dishes(self, db_session, service):
        cook = StaffMemberFactory()
        dishes = [OrderItemFactory() for _ in range(2)]

        service.activate_cook(cook.id)

        for dish in dishes:
            db_session.refresh(dish)
            assert dish.cook_id == cook.id
        assert {d.state for d in dishes} == {OrderItemState.PREPARING, OrderItemState.ASSIGNED}

    def test_activate_unknown_or_disabled_cook(self, db_session, service):
        disabled = StaffMemberFactory(is_active=False)

        with pytest.raises(NotFoundError):
            service.activate_cook(424242)
        with pytest.raises(NotFoundError):
            service.activate_cook(disabled.id)

    def test_activate_rejects_non_kitchen_staff(self, db_session, service):
        waiter = StaffMemberFactory(waiter=True)
        bartender = StaffMemberFactory(role__name=StaffRole.BARTENDER.value)
        dish = OrderItemFactory()

        with pytest.raises(ValidationError):
            service.activate_cook(waiter.id)
        with pytest.raises(ValidationError):
            service.activate_cook(bartender.id)

        assert db_session.query(KitchenCook).count() == 0
        db_session.refresh(dish)
        assert dish.cook_id is None
        assert dish.state == OrderItemState.PENDING

    def test_activate_follows_configured_cook_role(self, db_session):
        chef = StaffMemberFactory(role__name="Chef")
        service = KitchenService(
            db_session, KitchenAssignmentService(db_session, cook_role_name="chef")
        )

        assert service.activate_cook(chef.id).is_active is True

    def test_deactivate_keeps_held_dishes(self, db_session, service):
        leaving = KitchenCookFactory()
        staying = KitchenCookFactory()
        held = _assign(leaving.cook_id, OrderItemState.PREPARING)
        pooled = OrderItemFactory()

        entry = service.deactivate_cook(leaving.cook_id)

        assert entry.is_active is False
        db_session.refresh(held)
        db_session.refresh(pooled)
        assert held.cook_id == leaving.cook_id
        assert pooled.cook_id == staying.cook_id

    def test_deactivate_requires_roster_entry(self, db_session, service):
        cook = StaffMemberFactory()

        with pytest.raises(NotFoundError):
            service.deactivate_cook(cook.id)

    def test_heartbeat_touches_last_seen(self, db_session, service):
        entry = KitchenCookFactory(last_seen_at=datetime(2020, 1, 1))

        updated = service.heartbeat(entry.cook_id)

        assert updated.last_seen_at > datetime(2020, 1, 1)

    def test_heartbeat_requires_roster_entry(self, db_session, service):
        with pytest.raises(NotFoundError):
            service.heartbeat(1)


class TestCookViews:
    def test_current_and_queue(self, db_session, service):
        cook = KitchenCookFactory()
        later = _assign(cook.cook_id, minutes=5)
        current = _assign(cook.cook_id, OrderItemState.PREPARING, minutes=0)
        earlier = _assign(cook.cook_id, minutes=2)
        _assign(cook.cook_id, OrderItemState.READY, minutes=1)
        _assign(KitchenCookFactory().cook_id, minutes=3)

        view = service.get_cook_items(cook.cook_id)

        assert view["current"].id == current.id
        assert [it.id for it in view["queue"]] == [earlier.id, later.id]

    def test_idle_cook(self, db_session, service):
        cook = KitchenCookFactory()

        assert service.get_cook_items(cook.cook_id) == {"current": None, "queue": []}

    def test_history_newest_first(self, db_session, service):
        cook = KitchenCookFactory()
        old = _assign(cook.cook_id, OrderItemState.READY, finished_at=datetime(2025, 1, 1, 13, 0))
        new = _assign(cook.cook_id, OrderItemState.READY, finished_at=datetime(2025, 1, 1, 14, 0))
        _assign(cook.cook_id, OrderItemState.PREPARING)

        history = service.get_history(cook.cook_id)

        assert [it.id for it in history] == [new.id, old.id]
        assert [it.id for it in service.get_history(cook.cook_id, limit=1)] == [new.id]


class TestItemActions:
    def test_accept_starts_queued_dish(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id)

        accepted = service.accept_item(item.id, cook.cook_id)

        assert accepted.state == OrderItemState.PREPARING

    def test_accept_dish_in_preparation_is_unchanged(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id, OrderItemState.PREPARING)

        assert service.accept_item(item.id, cook.cook_id).state == OrderItemState.PREPARING

    def test_accept_while_busy(self, db_session, service):
        cook = KitchenCookFactory()
        _assign(cook.cook_id, OrderItemState.PREPARING)
        queued = _assign(cook.cook_id, minutes=1)

        with pytest.raises(ConflictError):
            service.accept_item(queued.id, cook.cook_id)

    def test_accept_loses_to_dish_started_meanwhile(self, db_session, service, monkeypatch):
        cook = KitchenCookFactory()
        older = _assign(cook.cook_id, minutes=0)
        newer = _assign(cook.cook_id, minutes=1)
        load_dish = service._get_held_dish

        def load_then_promote(item_id, cook_id):
            item = load_dish(item_id, cook_id)
            # Another request starts the cook's oldest dish before the accept is written
            KitchenAssignmentService(db_session).promote_next(cook_id)
            return item

        monkeypatch.setattr(service, "_get_held_dish", load_then_promote)

        with pytest.raises(ConflictError):
            service.accept_item(newer.id, cook.cook_id)

        db_session.expire_all()
        preparing = (
            db_session.query(OrderItem)
            .filter(OrderItem.cook_id == cook.cook_id, OrderItem.state == OrderItemState.PREPARING)
            .all()
        )
        assert [it.id for it in preparing] == [older.id]
        assert db_session.get(OrderItem, newer.id).state == OrderItemState.ASSIGNED

    def test_accept_ready_dish(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id, OrderItemState.READY)

        with pytest.raises(ValidationError):
            service.accept_item(item.id, cook.cook_id)

    def test_actions_on_someone_elses_dish(self, db_session, service):
        owner = KitchenCookFactory()
        other = KitchenCookFactory()
        item = _assign(owner.cook_id)

        with pytest.raises(PermissionError):
            service.accept_item(item.id, other.cook_id)
        with pytest.raises(PermissionError):
            service.reject_item(item.id, other.cook_id)
        with pytest.raises(PermissionError):
            service.mark_ready(item.id, other.cook_id)

    def test_drinks_are_not_kitchen_items(self, db_session, service):
        cook = KitchenCookFactory()
        drink = _assign(cook.cook_id, kind=OrderItemKind.DRINK)

        with pytest.raises(NotFoundError):
            service.accept_item(drink.id, cook.cook_id)

    def test_reject_moves_dish_to_other_cook(self, db_session, service):
        cook_a = KitchenCookFactory()
        cook_b = KitchenCookFactory()
        item = _assign(cook_a.cook_id)

        result = service.reject_item(item.id, cook_a.cook_id)

        assert result == {"item_id": item.id, "reassigned": True, "cook_id": cook_b.cook_id}
        db_session.refresh(item)
        assert item.state == OrderItemState.PREPARING

    def test_reject_dish_in_preparation_starts_next(self, db_session, service):
        cook_a = KitchenCookFactory()
        cook_b = KitchenCookFactory()
        current = _assign(cook_a.cook_id, OrderItemState.PREPARING)
        queued = _assign(cook_a.cook_id, minutes=1)

        result = service.reject_item(current.id, cook_a.cook_id)

        assert result["cook_id"] == cook_b.cook_id
        db_session.refresh(queued)
        assert queued.state == OrderItemState.PREPARING

    def test_reject_with_nobody_else_leaves_dish_pending(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id)

        result = service.reject_item(item.id, cook.cook_id)

        assert result == {"item_id": item.id, "reassigned": False, "cook_id": None}
        db_session.refresh(item)
        assert item.state == OrderItemState.PENDING
        assert item.assigned_at is None

    def test_reject_ready_dish(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id, OrderItemState.READY)

        with pytest.raises(ValidationError):
            service.reject_item(item.id, cook.cook_id)

    def test_ready_starts_next_and_refills(self, db_session, service):
        cook = KitchenCookFactory()
        current = _assign(cook.cook_id, OrderItemState.PREPARING)
        queued = [_assign(cook.cook_id, minutes=i + 1) for i in range(3)]
        pooled = OrderItemFactory()

        finished = service.mark_ready(current.id, cook.cook_id)

        assert finished.state == OrderItemState.READY
        assert finished.finished_at is not None
        assert finished.cook_id == cook.cook_id
        db_session.refresh(queued[0])
        db_session.refresh(pooled)
        assert queued[0].state == OrderItemState.PREPARING
        assert pooled.cook_id == cook.cook_id
        assert pooled.state == OrderItemState.ASSIGNED

    def test_ready_straight_from_queue(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id)

        assert service.mark_ready(item.id, cook.cook_id).state == OrderItemState.READY

    def test_ready_twice(self, db_session, service):
        cook = KitchenCookFactory()
        item = _assign(cook.cook_id, OrderItemState.READY)

        with pytest.raises(ValidationError):
            service.mark_ready(item.id, cook.cook_id)

    def test_ready_keeps_order_open_until_finished(self, db_session, service):
        cook = KitchenCookFactory()
        order = OrderFactory()
        item = _assign(cook.cook_id, OrderItemState.PREPARING, order=order)

        service.mark_ready(item.id, cook.cook_id)

        db_session.refresh(order)
        assert order.finished_at is None
