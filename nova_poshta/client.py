"""Nova Poshta API client: one method per remote operation."""

import dataclasses
import logging
from collections.abc import Callable
from datetime import date
from typing import TypeVar

import requests

from nova_poshta import shipment
from nova_poshta.base_client import JsonApiClient
from nova_poshta.config import ClientConfig, Language
from nova_poshta.models import (
    WAREHOUSE_DOORS,
    WAREHOUSE_WAREHOUSE,
    Address,
    City,
    CounterpartyAddress,
    Recipient,
    RecipientCounterparty,
    Settlement,
    ShipmentConfirmation,
    ShipmentRequest,
    Street,
    TrackingStatus,
    Warehouse,
)
from nova_poshta.result import DecodeError, Err, Ok, Result

logger = logging.getLogger(__name__)

MARKING_URL = (
    "https://my.novaposhta.ua/orders/printMarking100x100/orders/{numbers}"
    "/type/pdf/zebra/zebra/apiKey/{api_key}"
)

T = TypeVar("T")


def _decode(result: Result[list], decoder: Callable[[list], T]) -> Result[T]:
    """Apply a response decoder to an Ok result; shape mismatches become Err."""
    if isinstance(result, Err):
        return result
    try:
        return Ok(decoder(result.data))
    except DecodeError as exc:
        logger.warning("Malformed response: %s", exc)
        return Err([f"Malformed response: {exc}"])


class NovaPoshtaClient(JsonApiClient):
    """Client for the Nova Poshta JSON API v2.0.

    Lookups (cities, settlements, streets, warehouses) return an empty list
    when the call fails. Every other operation returns the Ok/Err result so
    failures stay visible to the caller.

    Config setters are not safe to call while other threads have calls in
    flight; prefer ``with_language`` to get a separate client.
    """

    @classmethod
    def from_env(cls, session: requests.Session | None = None, **overrides) -> "NovaPoshtaClient":
        """Build a client from NOVA_POSHTA_* environment variables (or a .env file)."""
        return cls(ClientConfig.from_env(**overrides), session)

    @property
    def language(self) -> Language:
        return self.config.language

    def set_language(self, language: str | Language) -> None:
        self.config = dataclasses.replace(self.config, language=Language.parse(language))

    def set_limit(self, limit: int) -> None:
        self.config = dataclasses.replace(self.config, limit=int(limit))

    def set_api_key(self, api_key: str) -> None:
        self.config = dataclasses.replace(self.config, api_key=api_key)

    def with_language(self, language: str | Language) -> "NovaPoshtaClient":
        """A new client sharing this session but answering in ``language``."""
        config = dataclasses.replace(self.config, language=Language.parse(language))
        return type(self)(config, self.session)

    # Lookups

    def _lookup(
        self,
        model_name: str,
        called_method: str,
        properties: dict,
        decoder: Callable[[list], list[T]],
    ) -> list[T]:
        result = _decode(self.execute(model_name, called_method, properties), decoder)
        if isinstance(result, Err):
            return []
        return result.data

    def get_cities(self, find_by_string: str = "", page: int = 1) -> list[City]:
        """Search cities served by Nova Poshta by (partial) name."""
        language = self.language
        return self._lookup(
            "Address",
            "getCities",
            {"FindByString": find_by_string, "Limit": self.config.limit, "Page": page},
            lambda data: [City.from_raw(row, language) for row in data],
        )

    def get_settlements(self, city_name: str, page: int = 1) -> list[Settlement]:
        """Search settlements (cities, towns, villages) by name."""
        language = self.language
        return self._lookup(
            "Address",
            "searchSettlements",
            {"CityName": city_name, "Limit": self.config.limit, "Page": page},
            lambda data: Settlement.list_from_response(data, language),
        )

    def get_streets(self, city_ref: str, find_by_string: str = "", page: int = 1) -> list[Street]:
        """Search streets of a city; the refs feed create_counterparty_address."""
        language = self.language
        return self._lookup(
            "Address",
            "getStreet",
            {
                "CityRef": city_ref,
                "FindByString": find_by_string,
                "Limit": self.config.limit,
                "Page": page,
            },
            lambda data: [Street.from_raw(row, language) for row in data],
        )

    def get_warehouses(self, city_ref: str, find_by_string: str = "", page: int = 1) -> list[Warehouse]:
        """List branches and parcel lockers of a city."""
        language = self.language
        return self._lookup(
            "Address",
            "getWarehouses",
            {
                "CityRef": city_ref,
                "FindByString": find_by_string,
                "Limit": self.config.limit,
                "Page": page,
            },
            lambda data: [Warehouse.from_raw(row, language) for row in data],
        )

    # Counterparties and addresses

    def create_counterparty_recipient(self, city_ref: str, recipient: Recipient) -> Result[list]:
        return self.execute("Counterparty", "save", {
            "CityRef": city_ref,
            "FirstName": recipient.first_name,
            "MiddleName": recipient.middle_name,
            "LastName": recipient.last_name,
            "Phone": recipient.phone,
            "Email": "",
            "CounterpartyType": "PrivatePerson",
            "CounterpartyProperty": "Recipient",
        })

    def delete_counterparty(self, ref: str) -> Result[list]:
        return self.execute("Counterparty", "delete", {"Ref": ref})

    def create_counterparty_address(self, counterparty_ref: str, address: Address) -> Result[list]:
        return self.execute("Address", "save", {
            "CounterpartyRef": counterparty_ref,
            "FindByString": address.find_by_string,
            "StreetRef": address.street_ref,
            "BuildingNumber": address.building_number,
            "Flat": address.flat,
        })

    def delete_counterparty_address(self, ref: str) -> Result[list]:
        return self.execute("Address", "delete", {"Ref": ref})

    def get_counterparty_sender(self) -> Result[list]:
        return self.execute("Counterparty", "getCounterparties", {"CounterpartyProperty": "Sender"})

    def get_counterparty_contact_persons(self, ref: str) -> Result[list]:
        return self.execute("Counterparty", "getCounterpartyContactPersons", {"Ref": ref})

    # Documents and tracking

    def delete_internet_document(self, document_refs: list[str]) -> Result[list]:
        return self.execute("InternetDocument", "delete", {"DocumentRefs": list(document_refs)})

    def get_document_list(
        self,
        date_from: str,
        date_to: str,
        redelivery_money: bool = False,
        unassembled_cargo: bool = False,
    ) -> Result[list]:
        """Waybills created between two dates (DD.MM.YYYY)."""
        return self.execute("InternetDocument", "getDocumentList", {
            "DateTimeFrom": date_from,
            "DateTimeTo": date_to,
            "RedeliveryMoney": redelivery_money,
            "UnassembledCargo": unassembled_cargo,
            "GetFullList": 1,
        })

    def get_status(self, document_numbers: list[str], phone: str = "") -> Result[list[TrackingStatus]]:
        """Track documents. The phone unlocks recipient details in the answer."""
        documents = [{"DocumentNumber": number, "Phone": phone} for number in document_numbers]
        result = self.execute("TrackingDocument", "getStatusDocuments", {"Documents": documents})
        return _decode(result, lambda data: [TrackingStatus.from_raw(row) for row in data])

    def get_marking_zebra(self, tracking_numbers: list[str]) -> bytes | None:
        """100x100 zebra label PDF for the given waybills, or None on failure."""
        url = MARKING_URL.format(
            numbers=",".join(tracking_numbers),
            api_key=self.config.api_key,
        )
        return self.fetch_binary(url)

    # Registries (scan sheets)

    def get_registry(self) -> Result[list]:
        return self.execute("ScanSheet", "getScanSheetList")

    def add_registry(self, document_refs: list[str], registry_ref: str | None = None) -> Result[list]:
        """Add documents to a registry; a new one is opened when no ref is given."""
        return self.execute("ScanSheet", "insertDocuments", {
            "DocumentRefs": list(document_refs),
            "Ref": registry_ref,
        })

    def delete_registry(self, document_refs: list[str], ref: str) -> Result[list]:
        return self.execute("ScanSheet", "removeDocuments", {
            "DocumentRefs": list(document_refs),
            "Ref": ref,
        })

    def get_pack_list_special(self) -> Result[list]:
        return self.execute("Common", "getPackListSpecial", {
            "Length": 10,
            "Width": 10,
            "Height": 190,
            "PackForSale": 1,
        })

    # Shipment creation

    def create_shipment(
        self,
        request: ShipmentRequest,
        today: date | None = None,
    ) -> Result[ShipmentConfirmation]:
        """Create a waybill (InternetDocument) for an order.

        For WarehouseDoors the recipient counterparty and its address are
        created first. The first failing step's Err is returned and nothing
        after it runs. Resources created before a failing save are left in
        place remotely.

        Args:
            request: Sender refs, recipient data, parcels and payment terms.
            today: Reference date for the ship date (tomorrow); defaults to
                the current date.

        Returns:
            Ok with the ShipmentConfirmation, or the Err of the failing step.
        """
        # Parsed before any remote call.
        amount = 0
        if request.paid == 0:
            try:
                amount = shipment.truncate_amount(request.total_price)
            except (ArithmeticError, ValueError):
                logger.warning("Invalid total price: %r", request.total_price)
                return Err([f"Invalid total price: {request.total_price!r}"])

        properties = shipment.base_properties(request, today)

        if request.service_type == WAREHOUSE_WAREHOUSE:
            shipment.add_warehouse_warehouse(properties, request)
        elif request.service_type == WAREHOUSE_DOORS:
            failure = self._add_recipient_door(properties, request)
            if failure is not None:
                return failure
        else:
            logger.warning("Unsupported service type: %s", request.service_type)
            return Err([f"Unsupported service type: {request.service_type}"])

        shipment.add_payment(properties, request, amount)

        result = self.execute("InternetDocument", "save", properties)
        return _decode(result, lambda data: ShipmentConfirmation.from_raw(data[0]))

    def _add_recipient_door(self, properties: dict, request: ShipmentRequest) -> Err | None:
        recipient = _decode(
            self.create_counterparty_recipient(
                request.recipient_city.ref,
                Recipient(
                    first_name=request.recipient_name,
                    middle_name=request.recipient_patronymic,
                    last_name=request.recipient_surname,
                    phone=request.recipient_phone,
                ),
            ),
            lambda data: RecipientCounterparty.from_raw(data[0]),
        )
        if isinstance(recipient, Err):
            return recipient

        door = request.recipient_address
        address = _decode(
            self.create_counterparty_address(
                recipient.data.ref,
                Address(
                    street_ref=door.street_ref,
                    building_number=door.building_number,
                    flat=door.flat,
                ),
            ),
            lambda data: CounterpartyAddress.from_raw(data[0]),
        )
        if isinstance(address, Err):
            return address

        shipment.add_warehouse_doors(properties, request, recipient.data, address.data)
        return None
