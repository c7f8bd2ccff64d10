"""Items printed on the checklist, per variant."""

from __future__ import annotations

from dataclasses import dataclass

from .models import ChecklistVariant

PER_DRIVER_NOTE = " (1/driver)"


@dataclass(slots=True, frozen=True)
class EquipmentItem:
    name: str
    icon: str
    has_date: bool = False
    per_driver: bool = False

    @property
    def label(self) -> str:
        return self.name + (PER_DRIVER_NOTE if self.per_driver else "")


FIRE_EXTINGUISHER = "Fire extinguisher"
MASK_AND_FILTER = "Mask + filter (ADR class 6.1/2.3)"

EQUIPMENT_ITEMS: tuple[EquipmentItem, ...] = (
    EquipmentItem(FIRE_EXTINGUISHER, "fire-extinguisher.png", has_date=True),
    EquipmentItem("Wheel chock", "wheel-chock.png"),
    EquipmentItem("2 lamps/warning triangle", "warning-triangle.png"),
    EquipmentItem("Eye wash", "eye-wash.png"),
    EquipmentItem("Written ADR instructions", "adr-instructions.png"),
    EquipmentItem("Shovel", "shovel.png"),
    EquipmentItem("Drain seal", "drain-seal.png"),
    EquipmentItem("Flashlight", "flashlight.png", per_driver=True),
    EquipmentItem("Rubber gloves", "rubber-gloves.png", per_driver=True),
    EquipmentItem("Safety glasses", "safety-glasses.png", per_driver=True),
    EquipmentItem(MASK_AND_FILTER, "mask-filter.png", has_date=True, per_driver=True),
    EquipmentItem("Collection bucket", "collection-bucket.png", per_driver=True),
)

BEFORE_LOADING_ITEMS: tuple[str, ...] = (
    "ADR plate front+back",
    "Tension belts 2500DAN, 15 for FTL (Tilt trailer)",
    "No visual damages on the truck/trailer",
    "Loading security stanchions (box trailer)",
    "Tires with at least 3 mm of profile",
    "Slip mats, 40 for FTL",
    "Loading floor dry, clean, tidy, odorless",
    "Product compatibility and segregation",
)

AFTER_LOADING_ITEMS: tuple[str, ...] = (
    "Goods correctly secured: This load has been secured in accordance STVO 22",
    "Doors closed/Twist locks tight",
    "Seal on right door",
    "ADR plate front + back are open",
    "Markings and Labels in Case of IMO",
)

_REDUCED_WITHOUT_EQUIPMENT = frozenset(
    {
        "Drain seal",
        "Rubber gloves",
        "Collection bucket",
        MASK_AND_FILTER,
        "Safety glasses",
        "Shovel",
        "Eye wash",
    }
)
_REDUCED_WITHOUT_BEFORE = frozenset({"ADR plate front+back"})
_REDUCED_WITHOUT_AFTER = frozenset({"ADR plate front + back are open"})


def equipment_items(variant: ChecklistVariant) -> tuple[EquipmentItem, ...]:
    if not variant.is_reduced:
        return EQUIPMENT_ITEMS
    return tuple(item for item in EQUIPMENT_ITEMS if item.name not in _REDUCED_WITHOUT_EQUIPMENT)


def before_loading_items(variant: ChecklistVariant) -> tuple[str, ...]:
    if not variant.is_reduced:
        return BEFORE_LOADING_ITEMS
    return tuple(item for item in BEFORE_LOADING_ITEMS if item not in _REDUCED_WITHOUT_BEFORE)


def after_loading_items(variant: ChecklistVariant) -> tuple[str, ...]:
    if not variant.is_reduced:
        return AFTER_LOADING_ITEMS
    return tuple(item for item in AFTER_LOADING_ITEMS if item not in _REDUCED_WITHOUT_AFTER)
