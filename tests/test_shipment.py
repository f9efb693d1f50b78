from datetime import date
from decimal import Decimal

import pytest

from conftest import make_response, ok, rejected, sent_envelope
from nova_poshta import shipment
from nova_poshta.models import (
    ParcelDetail,
    RecipientAddress,
    RecipientCity,
    ShipmentConfirmation,
    ShipmentRequest,
)
from nova_poshta.result import Err, Ok

SAVED = {"Ref": "doc-ref", "IntDocNumber": "20450000000001", "CostOnSite": 70}


def make_request(**overrides):
    fields = dict(
        order_id="1042",
        description="Одяг",
        service_type="WarehouseWarehouse",
        details=[ParcelDetail(weight=0.5), ParcelDetail(weight=1.25)],
        sender_city_ref="sender-city",
        sender_ref="sender",
        sender_warehouse_ref="sender-wh",
        sender_contact_ref="sender-contact",
        sender_phone="380500000000",
        recipient_name="Іван",
        recipient_surname="Петренко",
        recipient_patronymic="Іванович",
        recipient_phone="380501234567",
        recipient_city=RecipientCity(ref="city-ref", name="Київ", area="Київська", region="Київський"),
        recipient_address=RecipientAddress(
            name="Відділення №12",
            street_ref="street-ref",
            building_number="1",
            flat="5",
        ),
        total_price=Decimal("250.90"),
        paid=1,
    )
    fields.update(overrides)
    return ShipmentRequest(**fields)


def test_base_properties_derived_fields():
    props = shipment.base_properties(make_request(), today=date(2026, 12, 31))

    assert props["SeatsAmount"] == 2
    assert props["Weight"] == 1.75
    assert props["Description"] == "Одяг. №1042"
    assert props["InfoRegClientBarcodes"] == "1042"
    assert props["DateTime"] == "01.01.2027"
    assert props["RecipientName"] == "Петренко Іван Іванович"
    assert "EDRPOU" not in props


def test_truncate_amount_does_not_round():
    assert shipment.truncate_amount(250.9) == 250
    assert shipment.truncate_amount("99.99") == 99
    assert shipment.truncate_amount(Decimal("100")) == 100


def test_warehouse_warehouse_makes_single_call(client, session):
    session.post.return_value = ok(SAVED)

    result = client.create_shipment(make_request(), today=date(2026, 10, 19))

    assert result == Ok(ShipmentConfirmation(
        tracking_number="20450000000001",
        document_ref="doc-ref",
        estimated_cost=Decimal("70"),
    ))
    assert session.post.call_count == 1
    envelope = sent_envelope(session)
    assert (envelope["modelName"], envelope["calledMethod"]) == ("InternetDocument", "save")
    props = envelope["methodProperties"]
    assert props["RecipientCityName"] == "Київ"
    assert props["RecipientArea"] == "Київська"
    assert props["RecipientAreaRegions"] == "Київський"
    assert props["RecipientAddressName"] == "Відділення №12"
    assert props["DateTime"] == "20.10.2026"
    assert "BackwardDeliveryData" not in props
    assert "AfterpaymentOnGoodsCost" not in props


def test_unpaid_private_person_gets_backward_delivery(client, session):
    session.post.return_value = ok(SAVED)

    client.create_shipment(make_request(paid=0, total_price=250.9))

    props = sent_envelope(session)["methodProperties"]
    assert props["BackwardDeliveryData"] == [
        {"PayerType": "Recipient", "CargoType": "Money", "RedeliveryString": 250},
    ]
    assert "AfterpaymentOnGoodsCost" not in props


def test_unpaid_company_gets_afterpayment(client, session):
    session.post.return_value = ok(SAVED)

    client.create_shipment(make_request(paid=0, total_price=250.9, edrpou="12345678"))

    props = sent_envelope(session)["methodProperties"]
    assert props["EDRPOU"] == "12345678"
    assert props["AfterpaymentOnGoodsCost"] == 250
    assert "BackwardDeliveryData" not in props


def test_warehouse_doors_chains_refs(client, session):
    session.post.side_effect = [
        ok({"Ref": "cp-ref", "ContactPerson": {"success": True, "data": [{"Ref": "contact-ref"}]}}),
        ok({"Ref": "addr-ref", "Description": "вул. Хрещатик 1 кв. 5"}),
        ok(SAVED),
    ]

    result = client.create_shipment(make_request(service_type="WarehouseDoors", paid=0))

    assert isinstance(result, Ok)
    assert session.post.call_count == 3

    recipient_call = sent_envelope(session, 0)
    assert (recipient_call["modelName"], recipient_call["calledMethod"]) == ("Counterparty", "save")
    assert recipient_call["methodProperties"]["CityRef"] == "city-ref"
    assert recipient_call["methodProperties"]["MiddleName"] == "Іванович"

    address_call = sent_envelope(session, 1)
    assert address_call["methodProperties"]["CounterpartyRef"] == "cp-ref"
    assert address_call["methodProperties"]["StreetRef"] == "street-ref"

    props = sent_envelope(session, 2)["methodProperties"]
    assert props["CityRecipient"] == "city-ref"
    assert props["Recipient"] == "cp-ref"
    assert props["RecipientAddress"] == "addr-ref"
    assert props["RecipientAddressName"] == "вул. Хрещатик 1 кв. 5"
    assert props["ContactRecipient"] == "contact-ref"
    assert props["BackwardDeliveryData"][0]["RedeliveryString"] == 250


def test_warehouse_doors_recipient_failure_short_circuits(client, session):
    session.post.return_value = rejected("bad phone")

    result = client.create_shipment(make_request(service_type="WarehouseDoors"))

    assert result == Err(["bad phone"])
    assert session.post.call_count == 1


def test_warehouse_doors_address_failure_short_circuits(client, session):
    session.post.side_effect = [
        ok({"Ref": "cp-ref", "ContactPerson": {"data": [{"Ref": "contact-ref"}]}}),
        rejected("Building number is empty"),
    ]

    result = client.create_shipment(make_request(service_type="WarehouseDoors"))

    assert result == Err(["Building number is empty"])
    assert session.post.call_count == 2


def test_warehouse_doors_missing_contact_person_is_err(client, session):
    session.post.return_value = ok({"Ref": "cp-ref"})

    result = client.create_shipment(make_request(service_type="WarehouseDoors"))

    assert isinstance(result, Err)
    assert result.errors[0].startswith("Malformed response:")
    assert session.post.call_count == 1


def test_save_failure_is_returned_unchanged(client, session):
    session.post.return_value = rejected("Weight is invalid", "Seats amount is invalid")

    result = client.create_shipment(make_request())

    assert result == Err(["Weight is invalid", "Seats amount is invalid"])


def test_save_with_empty_data_is_err(client, session):
    session.post.return_value = make_response({"success": True, "data": []})

    assert isinstance(client.create_shipment(make_request()), Err)


@pytest.mark.parametrize("service_type", ["DoorsDoors", ""])
def test_unsupported_service_type_makes_no_calls(client, session, service_type):
    result = client.create_shipment(make_request(service_type=service_type))

    assert result == Err([f"Unsupported service type: {service_type}"])
    session.post.assert_not_called()


@pytest.mark.parametrize("service_type", ["WarehouseWarehouse", "WarehouseDoors"])
@pytest.mark.parametrize("total_price", ["250,90", "", float("nan"), "inf"])
def test_invalid_total_price_is_err_before_any_call(client, session, service_type, total_price):
    result = client.create_shipment(
        make_request(service_type=service_type, paid=0, total_price=total_price),
    )

    assert result == Err([f"Invalid total price: {total_price!r}"])
    session.post.assert_not_called()


def test_invalid_total_price_ignored_when_paid(client, session):
    session.post.return_value = ok(SAVED)

    result = client.create_shipment(make_request(paid=1, total_price="250,90"))

    assert isinstance(result, Ok)


@pytest.mark.parametrize("cost", [None, "", "n/a"])
def test_unreadable_cost_still_confirms_created_document(client, session, cost):
    session.post.return_value = ok({"Ref": "doc-ref", "IntDocNumber": "20450000000001", "CostOnSite": cost})

    result = client.create_shipment(make_request())

    assert result == Ok(ShipmentConfirmation(
        tracking_number="20450000000001",
        document_ref="doc-ref",
        estimated_cost=Decimal(0),
    ))
