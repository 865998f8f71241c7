"""
Seed data for development and testing.
Creates the room infrastructure (KTV rooms, hotel rooms) and a starter menu.
"""

from sqlalchemy.orm import Session

from pos_api.models import HotelRoom, KTVRoom, MenuItem
from pos_api.repositories import (
    SqlCollectionStore,
    get_hotel_room_repository,
    get_ktv_room_repository,
    get_menu_item_repository,
)
from pos_shared.config.constants import KTVRoomType, MenuTag
from pos_shared.config.logging import get_logger

logger = get_logger(__name__)

HOTEL_FLOORS = {2: "82", 3: "83"}
ROOMS_PER_FLOOR = 32

KTV_ROOMS = [
    KTVRoom(id="KTV-VIP", name="4F-VIP", room_type=KTVRoomType.VIP, hourly_rate_cents=150_000),
    KTVRoom(id="KTV-01", name="4F-K01", room_type=KTVRoomType.LARGE, hourly_rate_cents=100_000),
    KTVRoom(id="KTV-02", name="4F-K02", room_type=KTVRoomType.MEDIUM, hourly_rate_cents=80_000),
    KTVRoom(id="KTV-03", name="4F-K03", room_type=KTVRoomType.SMALL, hourly_rate_cents=50_000),
]

MENU_ITEMS = [
    MenuItem(
        id="dish-kungpao",
        name="Kung Pao Chicken",
        price_cents=4_500,
        tags=frozenset({MenuTag.FOOD, MenuTag.SIGNATURE}),
    ),
    MenuItem(
        id="dish-mapo",
        name="Mapo Tofu",
        price_cents=3_200,
        tags=frozenset({MenuTag.FOOD}),
    ),
    MenuItem(
        id="dish-cucumber",
        name="Smashed Cucumber",
        price_cents=1_500,
        tags=frozenset({MenuTag.FOOD, MenuTag.COLD_DISH, MenuTag.KTV_SERVABLE}),
    ),
    MenuItem(
        id="dish-peanuts",
        name="Spiced Peanuts",
        price_cents=1_200,
        tags=frozenset({MenuTag.FOOD, MenuTag.COLD_DISH, MenuTag.KTV_SERVABLE}),
    ),
    MenuItem(
        id="drink-beer",
        name="San Miguel Beer",
        price_cents=2_200,
        tags=frozenset({MenuTag.DRINK, MenuTag.KTV_SERVABLE, MenuTag.RETAIL}),
    ),
    MenuItem(
        id="drink-tea",
        name="Jasmine Tea Pot",
        price_cents=2_800,
        tags=frozenset({MenuTag.DRINK, MenuTag.KTV_SERVABLE}),
    ),
    MenuItem(
        id="retail-water",
        name="Mineral Water 500ml",
        price_cents=3_000,
        tags=frozenset({MenuTag.DRINK, MenuTag.RETAIL}),
    ),
    MenuItem(
        id="retail-noodles",
        name="Instant Noodles",
        price_cents=2_000,
        tags=frozenset({MenuTag.RETAIL}),
    ),
]


def hotel_room_numbers(prefix: str, count: int = ROOMS_PER_FLOOR) -> list[str]:
    """Room numbers for a floor, skipping any number containing a 4."""
    numbers = []
    for i in range(1, 61):
        number = f"{prefix}{i:02d}"
        if "4" in number:
            continue
        numbers.append(number)
        if len(numbers) >= count:
            break
    return numbers


def seed(db: Session) -> None:
    """
    Seed the database with initial data.
    Idempotent: each collection is only filled when it is empty.
    """
    store = SqlCollectionStore(db)

    ktv_rooms = get_ktv_room_repository(store)
    if not ktv_rooms.find_all():
        for room in KTV_ROOMS:
            ktv_rooms.add(room)
        logger.info("Seeded KTV rooms", count=len(KTV_ROOMS))

    hotel_rooms = get_hotel_room_repository(store)
    if not hotel_rooms.find_all():
        count = 0
        for floor, prefix in HOTEL_FLOORS.items():
            for number in hotel_room_numbers(prefix):
                hotel_rooms.add(HotelRoom(id=number, floor=floor))
                count += 1
        logger.info("Seeded hotel rooms", count=count)

    menu_items = get_menu_item_repository(store)
    if not menu_items.find_all():
        for item in MENU_ITEMS:
            menu_items.add(item)
        logger.info("Seeded menu items", count=len(MENU_ITEMS))
