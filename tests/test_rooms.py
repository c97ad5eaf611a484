import pytest
from decimal import Decimal

from vetclinic.core.exceptions import ConflictError, RoomFullError, RoomNotFoundError, ValidationError
from vetclinic.domain.rooms.models import RoomType


@pytest.mark.integration
@pytest.mark.rooms
class TestRoomRegistry:

    def test_add_room(self, registry):
        room = registry.add_room("ISO-01", RoomType.ISOLATION, capacity=2, daily_rate=Decimal("95.5"))

        assert room.number == "ISO-01"
        assert room.occupied == 0
        assert room.daily_rate == Decimal("95.50")
        assert room.is_available

    def test_duplicate_room_number_rejected(self, registry, icu_room):
        with pytest.raises(ConflictError) as exc_info:
            registry.add_room("ICU-01", RoomType.ICU, capacity=1, daily_rate=Decimal("150"))
        assert exc_info.value.error_code == "ROOM_EXISTS"

    @pytest.mark.parametrize("capacity, rate", [(0, "10"), (1, "0"), (1, "-5")])
    def test_invalid_room_rejected(self, registry, capacity, rate):
        with pytest.raises(ValidationError):
            registry.add_room("BAD-01", RoomType.GENERAL, capacity=capacity, daily_rate=Decimal(rate))

    def test_reserve_returns_rate_snapshot(self, registry, icu_room):
        rate = registry.reserve("ICU-01")

        assert rate == Decimal("150.00")
        assert registry.get_room("ICU-01").occupied == 1

    def test_reserve_full_room(self, registry, icu_room):
        registry.reserve("ICU-01")

        with pytest.raises(RoomFullError) as exc_info:
            registry.reserve("ICU-01")

        assert exc_info.value.error_code == "ROOM_FULL"
        assert registry.get_room("ICU-01").occupied == 1

    def test_reserve_unknown_room(self, registry):
        with pytest.raises(RoomNotFoundError):
            registry.reserve("NOPE-99")

    def test_release_floors_at_zero(self, registry, icu_room):
        registry.release("ICU-01")

        assert registry.get_room("ICU-01").occupied == 0

    def test_release_unknown_room(self, registry):
        with pytest.raises(RoomNotFoundError):
            registry.release("NOPE-99")

    def test_find_available_by_type(self, registry, icu_room, general_room):
        registry.reserve("ICU-01")
        registry.add_room("ICU-02", RoomType.ICU, capacity=2, daily_rate=Decimal("140"))

        available = registry.find_available(RoomType.ICU)
        assert [r.number for r in available] == ["ICU-02"]

        everything = registry.find_available()
        assert {r.number for r in everything} == {"ICU-02", "GEN-01"}

    def test_update_daily_rate(self, registry, general_room):
        room = registry.update_daily_rate("GEN-01", Decimal("65.00"))
        assert room.daily_rate == Decimal("65.00")

        with pytest.raises(ValidationError):
            registry.update_daily_rate("GEN-01", Decimal("0"))
