"""Typed views over Nova Poshta responses and the shipment request."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from nova_poshta.config import Language
from nova_poshta.result import DecodeError

WAREHOUSE_WAREHOUSE = "WarehouseWarehouse"
WAREHOUSE_DOORS = "WarehouseDoors"


def _row(raw: Any, what: str) -> dict:
    if not isinstance(raw, dict):
        raise DecodeError(f"{what}: expected an object, got {type(raw).__name__}")
    return raw


def _require(raw: dict, key: str, what: str) -> Any:
    value = raw.get(key)
    if value is None:
        raise DecodeError(f"{what}: missing field {key!r}")
    return value


def _int(value: Any, what: str) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        raise DecodeError(f"{what}: expected an integer, got {value!r}") from None


def localized(raw: dict, name: str, language: Language) -> str:
    """Pick the description field matching the configured language.

    Providers return e.g. ``Description`` (Ukrainian) next to
    ``DescriptionRu``; some calls spell it ``DescriptionUA``.
    """
    if language is Language.RU:
        candidates = [f"{name}RU", f"{name}Ru", name]
    else:
        candidates = [f"{name}UA", name]
    for key in candidates:
        if raw.get(key) is not None:
            return str(raw[key])
    return ""


@dataclass
class City:
    """A city from Address.getCities."""

    ref: str
    city_name: str
    area_ref: str = ""
    settlement_type: str = ""

    @classmethod
    def from_raw(cls, raw: Any, language: Language) -> "City":
        raw = _row(raw, "City")
        return cls(
            ref=str(_require(raw, "Ref", "City")),
            city_name=localized(raw, "Description", language),
            area_ref=str(raw.get("Area") or ""),
            settlement_type=localized(raw, "SettlementTypeDescription", language),
        )


@dataclass
class Settlement:
    """A settlement from Address.searchSettlements."""

    ref: str
    delivery_city_ref: str
    name: str
    present: str = ""
    area: str = ""
    region: str = ""
    settlement_type: str = ""
    warehouses: int = 0

    @classmethod
    def from_raw(cls, raw: Any, language: Language) -> "Settlement":
        raw = _row(raw, "Settlement")
        return cls(
            ref=str(_require(raw, "Ref", "Settlement")),
            delivery_city_ref=str(raw.get("DeliveryCity") or ""),
            name=localized(raw, "MainDescription", language),
            present=localized(raw, "Present", language),
            area=localized(raw, "Area", language),
            region=localized(raw, "Region", language),
            settlement_type=str(raw.get("SettlementTypeCode") or ""),
            warehouses=_int(raw.get("Warehouses"), "Settlement.Warehouses"),
        )

    @classmethod
    def list_from_response(cls, data: list, language: Language) -> list["Settlement"]:
        """searchSettlements nests the rows one level down, in data[0].Addresses."""
        head = _row(data[0], "Settlement search")
        addresses = head.get("Addresses")
        if not isinstance(addresses, list):
            raise DecodeError("Settlement search: missing 'Addresses' list")
        return [cls.from_raw(item, language) for item in addresses]


@dataclass
class Street:
    """A street from Address.getStreet."""

    ref: str
    name: str
    street_type: str = ""

    @classmethod
    def from_raw(cls, raw: Any, language: Language) -> "Street":
        raw = _row(raw, "Street")
        return cls(
            ref=str(_require(raw, "Ref", "Street")),
            name=localized(raw, "Description", language),
            street_type=str(raw.get("StreetsType") or ""),
        )


@dataclass
class Warehouse:
    """A branch or parcel locker from Address.getWarehouses."""

    ref: str
    number: str
    description: str
    short_address: str = ""
    city_ref: str = ""
    type_ref: str = ""

    @classmethod
    def from_raw(cls, raw: Any, language: Language) -> "Warehouse":
        raw = _row(raw, "Warehouse")
        return cls(
            ref=str(_require(raw, "Ref", "Warehouse")),
            number=str(_require(raw, "Number", "Warehouse")),
            description=localized(raw, "Description", language),
            short_address=localized(raw, "ShortAddress", language),
            city_ref=str(raw.get("CityRef") or ""),
            type_ref=str(raw.get("TypeOfWarehouse") or ""),
        )


@dataclass
class TrackingStatus:
    """Current state of one document from TrackingDocument.getStatusDocuments."""

    number: str
    status: str
    status_code: str = ""
    warehouse_recipient: str = ""
    scheduled_delivery_date: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "TrackingStatus":
        raw = _row(raw, "TrackingStatus")
        return cls(
            number=str(_require(raw, "Number", "TrackingStatus")),
            status=str(raw.get("Status") or ""),
            status_code=str(raw.get("StatusCode") or ""),
            warehouse_recipient=str(raw.get("WarehouseRecipient") or ""),
            scheduled_delivery_date=str(raw.get("ScheduledDeliveryDate") or ""),
        )


@dataclass
class RecipientCounterparty:
    """Refs returned by Counterparty.save for a new private-person recipient."""

    ref: str
    contact_ref: str

    @classmethod
    def from_raw(cls, raw: Any) -> "RecipientCounterparty":
        raw = _row(raw, "Counterparty")
        contact = _row(_require(raw, "ContactPerson", "Counterparty"), "Counterparty.ContactPerson")
        contacts = contact.get("data")
        if not isinstance(contacts, list) or not contacts:
            raise DecodeError("Counterparty.ContactPerson: missing 'data' rows")
        first = _row(contacts[0], "Counterparty.ContactPerson")
        return cls(
            ref=str(_require(raw, "Ref", "Counterparty")),
            contact_ref=str(_require(first, "Ref", "Counterparty.ContactPerson")),
        )


@dataclass
class CounterpartyAddress:
    """Ref and printable description returned by Address.save."""

    ref: str
    description: str

    @classmethod
    def from_raw(cls, raw: Any) -> "CounterpartyAddress":
        raw = _row(raw, "Address")
        return cls(
            ref=str(_require(raw, "Ref", "Address")),
            description=str(raw.get("Description") or ""),
        )


@dataclass
class ShipmentConfirmation:
    """What InternetDocument.save hands back for a created waybill."""

    tracking_number: str
    document_ref: str
    estimated_cost: Decimal

    @classmethod
    def from_raw(cls, raw: Any) -> "ShipmentConfirmation":
        raw = _row(raw, "InternetDocument")
        # The waybill already exists once Ref and IntDocNumber are back, so an
        # unreadable cost is reported as zero instead of failing the save.
        cost = raw.get("CostOnSite")
        try:
            estimated_cost = Decimal(str(cost))
        except ArithmeticError:
            estimated_cost = Decimal(0)
        if not estimated_cost.is_finite():
            estimated_cost = Decimal(0)
        return cls(
            tracking_number=str(_require(raw, "IntDocNumber", "InternetDocument")),
            document_ref=str(_require(raw, "Ref", "InternetDocument")),
            estimated_cost=estimated_cost,
        )


@dataclass
class Recipient:
    """A private person to register as a recipient counterparty."""

    first_name: str
    last_name: str
    phone: str
    middle_name: str = ""


@dataclass
class Address:
    """A door address for a recipient counterparty.

    Either ``street_ref`` (from get_streets) or ``find_by_string`` should be
    set; the unused one is sent as null.
    """

    building_number: str
    flat: str = ""
    street_ref: str | None = None
    find_by_string: str | None = None


@dataclass
class RecipientCity:
    """The recipient's city as already known to the caller."""

    ref: str
    name: str
    area: str = ""
    region: str = ""


@dataclass
class RecipientAddress:
    """Where the parcel is delivered.

    For WarehouseWarehouse only ``name`` (the warehouse number or name) is
    used. For WarehouseDoors ``street_ref``, ``building_number`` and ``flat``
    are used.
    """

    name: str = ""
    street_ref: str | None = None
    building_number: str = ""
    flat: str = ""


@dataclass
class ParcelDetail:
    """One seat of the shipment."""

    weight: float


@dataclass
class ShipmentRequest:
    """Everything needed to create an InternetDocument."""

    order_id: str
    description: str
    service_type: str
    details: list[ParcelDetail]
    sender_city_ref: str
    sender_ref: str
    sender_warehouse_ref: str
    sender_contact_ref: str
    sender_phone: str
    recipient_name: str
    recipient_surname: str
    recipient_phone: str
    recipient_city: RecipientCity
    recipient_address: RecipientAddress
    total_price: Decimal | float | int | str = 0
    paid: int = 1
    recipient_patronymic: str = ""
    edrpou: str | None = None

    @property
    def recipient_full_name(self) -> str:
        parts = [self.recipient_surname, self.recipient_name, self.recipient_patronymic]
        return " ".join(p for p in parts if p)
