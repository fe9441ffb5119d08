# Overview: Closed value sets for roles, conditions, statuses and product types.
# Each set is a plain constant class; ENUM_OPTIONS indexes them by name for the UI.

from __future__ import annotations

from .validation import ValidationError


class Role:
    """Member roles, used both globally (User.role) and per event (EventParticipant.role)."""
    ADMINISTRATOR = "Administrator"
    BOARD_OF_DIRECTORS = "Board of directors"
    FOUNDING_MEMBERS = "Founding members"
    MEMBER_REPRESENTATIVE = "Member representative"
    MEMBER = "Member"
    UNREGISTERED = "Unregistered"
    GUEST = "Guest"

    ALL = (
        ADMINISTRATOR,
        BOARD_OF_DIRECTORS,
        FOUNDING_MEMBERS,
        MEMBER_REPRESENTATIVE,
        MEMBER,
        UNREGISTERED,
        GUEST,
    )


class Condition:
    NEW = "New"
    USED = "Used"
    DAMAGED = "Damaged"
    REFURBISHED = "Refurbished"
    MINT = "Mint"
    UNOPENED = "Unopened"
    SEALED = "Sealed"
    VINTAGE = "Vintage"
    LIMITED_EDITION = "Limited Edition"
    DAMAGED_BOX = "Damaged Box"
    DAMAGED_ITEM = "Damaged Item"

    ALL = (
        NEW,
        USED,
        DAMAGED,
        REFURBISHED,
        MINT,
        UNOPENED,
        SEALED,
        VINTAGE,
        LIMITED_EDITION,
        DAMAGED_BOX,
        DAMAGED_ITEM,
    )


class Status:
    """
    Shared status vocabulary.

    Products mostly use the stock/ownership values; event listings use the
    sale lifecycle subset (ON_SALE, RESERVED, SOLD).
    """
    IN_STOCK = "In Stock"
    SOLD = "Sold"
    RESERVED = "Reserved"
    OUT_OF_STOCK = "Out of Stock"
    ON_SALE = "On Sale"
    IN_COLLECTION = "In Collection"
    ARCHIVED = "Archived"
    PRE_ORDER = "Pre-Order"
    IN_AUCTION = "In Auction"
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DISCONTINUED = "Discontinued"
    FOR_EVENT_SALE = "For Event Sale"

    ALL = (
        IN_STOCK,
        SOLD,
        RESERVED,
        OUT_OF_STOCK,
        ON_SALE,
        IN_COLLECTION,
        ARCHIVED,
        PRE_ORDER,
        IN_AUCTION,
        PENDING,
        SHIPPED,
        DISCONTINUED,
        FOR_EVENT_SALE,
    )


class ProductType:
    PREPAINTED = "Prepainted"
    ACTION_DOLL = "Action/Doll"
    TRADING_CARD = "Trading Card"
    GARAGE_KIT = "Garage Kit"
    MODEL_KIT = "Model Kit"
    ACCESSORY = "Accessory"
    PLUSHIE = "Plushie"
    LINEN = "Linen"
    DISH = "Dish"
    WALL_HANGING = "Hanged up / On Wall"
    APPAREL = "Apparel"
    STATIONERY = "Stationery"
    BOOKS = "Books"
    MUSIC = "Music"
    VIDEO = "Video"
    GAME = "Game"
    SOFTWARE = "Software"
    MISCELLANEOUS = "Miscellaneous"

    ALL = (
        PREPAINTED,
        ACTION_DOLL,
        TRADING_CARD,
        GARAGE_KIT,
        MODEL_KIT,
        ACCESSORY,
        PLUSHIE,
        LINEN,
        DISH,
        WALL_HANGING,
        APPAREL,
        STATIONERY,
        BOOKS,
        MUSIC,
        VIDEO,
        GAME,
        SOFTWARE,
        MISCELLANEOUS,
    )


# Participant roles that may manage an event's roster and sale listings.
# The event's recorded admin is always allowed on top of these.
ORGANIZER_ROLES = frozenset({Role.ADMINISTRATOR, Role.BOARD_OF_DIRECTORS})

# Role given to the creator's own participant row when an event is created.
EVENT_CREATOR_ROLE = Role.BOARD_OF_DIRECTORS

DEFAULT_USER_ROLE = Role.GUEST

ENUM_OPTIONS: dict[str, tuple[str, ...]] = {
    "roles": Role.ALL,
    "conditions": Condition.ALL,
    "status": Status.ALL,
    "productTypes": ProductType.ALL,
}


def get_options(name: str) -> list[str]:
    """Option list for a named value set (e.g. for form dropdowns)."""
    try:
        return list(ENUM_OPTIONS[name])
    except KeyError:
        raise ValidationError(
            f"Unknown option set: {name}. Expected one of: {', '.join(sorted(ENUM_OPTIONS))}"
        )

