# Overview: Pytest coverage for event analytics summaries.

from datetime import datetime, timedelta, timezone

import pytest
from goodies.choices import Role, Status
from goodies.extensions import db
from goodies.models import Event
from goodies.services import analytics_service, event_service
from goodies.services.permission_service import PermissionDeniedError
from goodies.validation import NotFoundError

from conftest import make_product


class TestEventAnalytics:

    def test_totals_by_status(self, db_session, member, event_id):
        on_sale = make_product(db_session, member, name="On sale")
        sold = make_product(db_session, member, name="Sold")
        event_service.add_product_to_sale(
            event_id=event_id, product_id=on_sale.id, sale_price_cents=2000, actor=member
        )
        sold_listing = event_service.add_product_to_sale(
            event_id=event_id, product_id=sold.id, sale_price_cents=3000, actor=member
        )
        event_service.update_product_status(
            event_product_id=sold_listing.id, status=Status.SOLD, actor=member
        )

        result = analytics_service.get_event_analytics(event_id=event_id, actor=member)

        assert result["products_on_sale_count"] == 1
        assert result["total_value_on_sale_cents"] == 2000
        assert result["products_sold_count"] == 1
        assert result["total_value_sold_cents"] == 3000

    def test_reserved_and_unpriced_listings(self, db_session, member, event_id):
        reserved = make_product(db_session, member, name="Reserved")
        unpriced = make_product(db_session, member, name="Unpriced")
        listing = event_service.add_product_to_sale(
            event_id=event_id, product_id=reserved.id, sale_price_cents=5000, actor=member
        )
        event_service.update_product_status(
            event_product_id=listing.id, status=Status.RESERVED, actor=member
        )
        event_service.add_product_to_sale(
            event_id=event_id, product_id=unpriced.id, sale_price_cents=None, actor=member
        )

        result = analytics_service.get_event_analytics(event_id=event_id, actor=member)

        assert result["products_on_sale_count"] == 1
        assert result["total_value_on_sale_cents"] == 0
        assert result["products_sold_count"] == 0

    def test_roster_summary(self, db_session, member, other_member, event_id):
        other_member.nickname = None
        db_session.commit()
        event_service.participate(event_id=event_id, actor=other_member)

        result = analytics_service.get_event_analytics(event_id=event_id, actor=member)

        assert result["participant_count"] == 2
        assert result["participants"] == [
            {"user_id": member.id, "role": Role.BOARD_OF_DIRECTORS, "nickname": member.nickname},
            {"user_id": other_member.id, "role": Role.GUEST, "nickname": other_member.email},
        ]

    def test_time_remaining(self, db_session, member, event_id):
        now = datetime(2030, 4, 1, 17, 0, 0)
        result = analytics_service.get_event_analytics(event_id=event_id, actor=member, now=now)
        assert result["time_remaining_ms"] == 60 * 60 * 1000

    def test_time_remaining_with_aware_datetimes(self, db_session, member, event_id):
        paris_summer = timezone(timedelta(hours=2))
        event = db.session.get(Event, event_id)
        event.end_time = datetime(2030, 4, 1, 20, 0, 0, tzinfo=paris_summer)

        now = datetime(2030, 4, 1, 19, 0, 0, tzinfo=paris_summer)
        result = analytics_service.get_event_analytics(event_id=event_id, actor=member, now=now)

        assert result["time_remaining_ms"] == 60 * 60 * 1000

    def test_time_remaining_floors_at_zero(self, db_session, member, event_id):
        now = datetime(2031, 1, 1)
        result = analytics_service.get_event_analytics(event_id=event_id, actor=member, now=now)
        assert result["time_remaining_ms"] == 0

    def test_requires_organizer(self, db_session, other_member, event_id):
        event_service.participate(event_id=event_id, actor=other_member)
        with pytest.raises(PermissionDeniedError):
            analytics_service.get_event_analytics(event_id=event_id, actor=other_member)

    def test_missing_event(self, db_session, member):
        with pytest.raises(NotFoundError):
            analytics_service.get_event_analytics(event_id=4040, actor=member)
