"""Payload building for InternetDocument.save."""

from datetime import date, timedelta
from decimal import Decimal

from nova_poshta.models import (
    CounterpartyAddress,
    RecipientCounterparty,
    ShipmentRequest,
)


def ship_date(today: date | None = None) -> str:
    """Tomorrow, formatted DD.MM.YYYY."""
    return ((today or date.today()) + timedelta(days=1)).strftime("%d.%m.%Y")


def truncate_amount(value: Decimal | float | int | str) -> int:
    """Drop the fractional part of a money amount (250.9 -> 250)."""
    return int(Decimal(str(value)))


def base_properties(request: ShipmentRequest, today: date | None = None) -> dict:
    """Fields common to every service type, including the derived ones."""
    properties: dict = {
        "NewAddress": "1",
        "PayerType": "Recipient",
        "PaymentMethod": "Cash",
        "CargoType": "Parcel",
        "SeatsAmount": len(request.details),
        "Weight": sum(detail.weight for detail in request.details),
        "ServiceType": request.service_type,
        "Description": f"{request.description}. №{request.order_id}",
        "InfoRegClientBarcodes": request.order_id,
        "DateTime": ship_date(today),
        "CitySender": request.sender_city_ref,
        "Sender": request.sender_ref,
        "SenderAddress": request.sender_warehouse_ref,
        "ContactSender": request.sender_contact_ref,
        "SendersPhone": request.sender_phone,
        "RecipientType": "PrivatePerson",
        "RecipientName": request.recipient_full_name,
        "RecipientsPhone": request.recipient_phone,
    }
    if request.edrpou:
        properties["EDRPOU"] = request.edrpou
    return properties


def add_warehouse_warehouse(properties: dict, request: ShipmentRequest) -> None:
    city = request.recipient_city
    properties["RecipientCityName"] = city.name
    properties["RecipientArea"] = city.area
    properties["RecipientAreaRegions"] = city.region
    properties["RecipientAddressName"] = request.recipient_address.name


def add_warehouse_doors(
    properties: dict,
    request: ShipmentRequest,
    recipient: RecipientCounterparty,
    address: CounterpartyAddress,
) -> None:
    properties["CityRecipient"] = request.recipient_city.ref
    properties["Recipient"] = recipient.ref
    properties["RecipientAddress"] = address.ref
    properties["RecipientAddressName"] = address.description
    properties["ContactRecipient"] = recipient.contact_ref


def add_payment(properties: dict, request: ShipmentRequest, amount: int) -> None:
    """Cash-on-delivery terms for an unpaid order.

    Companies (EDRPOU set) get afterpayment on goods; private persons get a
    single money backward delivery. ``amount`` is the already truncated
    total price.
    """
    if request.paid != 0:
        return
    if request.edrpou:
        properties["AfterpaymentOnGoodsCost"] = amount
    else:
        properties["BackwardDeliveryData"] = [
            {
                "PayerType": "Recipient",
                "CargoType": "Money",
                "RedeliveryString": amount,
            }
        ]
