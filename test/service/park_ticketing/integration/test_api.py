"""
HTTP tests through the FastAPI app

The catalog is seeded on the pytest event loop, then the engine is disposed so
the TestClient's own loop starts with a fresh one.
"""

from collections.abc import AsyncGenerator, Callable, Iterator
from typing import Any
from uuid import UUID

from fastapi.testclient import TestClient
import pytest
from uuid_utils.compat import uuid7

from src.main import app
from src.platform.config.di import container
from src.platform.database.orm_db_setting import Database
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from test.service.park_ticketing.seed import seed_ticket_type, seed_unit


Headers = Callable[[UserEntity], dict[str, str]]


@pytest.fixture
async def catalog(database: Database) -> AsyncGenerator[dict[str, UUID], None]:
    event_id = await seed_unit(database, capacity=3)
    adult_id = await seed_ticket_type(database, unit_id=event_id, max_quantity_per_booking=4)
    await database.dispose()
    yield {'event_id': event_id, 'adult_id': adult_id}


@pytest.fixture
def client(database: Database, catalog: dict[str, UUID]) -> Iterator[TestClient]:
    container.reset_singletons()
    container.database.override(database)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        container.database.reset_override()
        container.reset_singletons()


def _booking_body(catalog: dict[str, UUID], *, quantity: int = 2, **extra: Any) -> dict[str, Any]:
    return {
        'unitId': str(catalog['event_id']),
        'items': [{'ticketTypeId': str(catalog['adult_id']), 'quantity': quantity}],
        'paymentMethod': 'telebirr',
        **extra,
    }


@pytest.mark.integration
class TestCreateBookingApi:
    def test_guest_booking(self, client: TestClient, catalog: dict[str, UUID]):
        response = client.post(
            '/api/bookings',
            json=_booking_body(catalog, guestEmail='guest@example.com', guestName='Guest'),
        )

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        data = body['data']
        assert data['bookingStatus'] == 'confirmed'
        assert data['paymentStatus'] == 'pending'
        assert data['totalQuantity'] == 2
        assert data['totalAmount'] == '200.00'
        assert data['guestEmail'] == 'guest@example.com'
        assert data['userId'] is None
        assert len(data['tickets']) == 2
        assert data['tickets'][0]['ticketCode'].startswith('TKT-')
        assert data['payment']['amount'] == '200.00'

    def test_client_prices_are_ignored(
        self, client: TestClient, catalog: dict[str, UUID], visitor: UserEntity, auth_headers: Headers
    ):
        body = _booking_body(catalog, quantity=2, totalAmount='0.01')
        body['items'][0]['unitPrice'] = '0.01'
        body['items'][0]['subtotal'] = '0.02'

        response = client.post('/api/bookings', json=body, headers=auth_headers(visitor))

        assert response.status_code == 201
        data = response.json()['data']
        assert data['items'][0]['unitPrice'] == '100.00'
        assert data['items'][0]['subtotal'] == '200.00'
        assert data['totalAmount'] == '200.00'
        assert data['payment']['amount'] == '200.00'

        stored = client.get(f'/api/bookings/{data["id"]}', headers=auth_headers(visitor))
        assert stored.json()['data']['totalAmount'] == '200.00'
        assert stored.json()['data']['items'][0]['unitPrice'] == '100.00'

    def test_visitor_booking_ignores_guest_fields(
        self, client: TestClient, catalog: dict[str, UUID], visitor: UserEntity, auth_headers: Headers
    ):
        response = client.post(
            '/api/bookings',
            json=_booking_body(catalog, quantity=1, guestEmail='x@example.com', guestName='X'),
            headers=auth_headers(visitor),
        )

        assert response.status_code == 201
        data = response.json()['data']
        assert data['userId'] == str(visitor.id)
        assert data['guestEmail'] is None

    def test_guest_without_details(self, client: TestClient, catalog: dict[str, UUID]):
        response = client.post('/api/bookings', json=_booking_body(catalog))

        assert response.status_code == 400
        assert response.json()['kind'] == 'InvalidRequest'

    def test_capacity_exceeded_reports_remaining(
        self, client: TestClient, catalog: dict[str, UUID], visitor: UserEntity, auth_headers: Headers
    ):
        client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=2), headers=auth_headers(visitor)
        )

        response = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=2), headers=auth_headers(visitor)
        )

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['kind'] == 'CapacityExceeded'
        assert body['remaining'] == 1

    def test_malformed_body(self, client: TestClient, catalog: dict[str, UUID]):
        response = client.post('/api/bookings', json={'unitId': 'not-a-uuid', 'items': []})

        assert response.status_code == 400
        body = response.json()
        assert body['kind'] == 'InvalidRequest'
        assert body['errors']

    def test_unknown_unit(self, client: TestClient, catalog: dict[str, UUID]):
        body = _booking_body(catalog, guestEmail='guest@example.com', guestName='Guest')
        body['unitId'] = str(uuid7())

        response = client.post('/api/bookings', json=body)

        assert response.status_code == 404
        assert response.json()['kind'] == 'NotFound'


@pytest.mark.integration
class TestBookingAccessApi:
    def test_my_bookings_requires_token(self, client: TestClient):
        response = client.get('/api/bookings/my')

        assert response.status_code == 401
        assert response.json()['kind'] == 'Unauthenticated'

    def test_invalid_token_rejected_on_create(self, client: TestClient, catalog: dict[str, UUID]):
        response = client.post(
            '/api/bookings',
            json=_booking_body(catalog),
            headers={'Authorization': 'Bearer not-a-jwt'},
        )

        assert response.status_code == 401

    def test_other_visitor_cannot_read_booking(
        self,
        client: TestClient,
        catalog: dict[str, UUID],
        visitor: UserEntity,
        another_visitor: UserEntity,
        auth_headers: Headers,
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=1), headers=auth_headers(visitor)
        ).json()['data']

        own = client.get(f'/api/bookings/{created["id"]}', headers=auth_headers(visitor))
        other = client.get(f'/api/bookings/{created["id"]}', headers=auth_headers(another_visitor))

        assert own.status_code == 200
        assert own.json()['data']['reference'] == created['reference']
        assert other.status_code == 403

    def test_lookup_by_reference_is_case_insensitive(
        self, client: TestClient, catalog: dict[str, UUID], visitor: UserEntity, auth_headers: Headers
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=1), headers=auth_headers(visitor)
        ).json()['data']

        response = client.get(
            f'/api/bookings/reference/{created["reference"].lower()}', headers=auth_headers(visitor)
        )

        assert response.status_code == 200
        assert response.json()['data']['id'] == created['id']

    def test_cancel_then_list(
        self, client: TestClient, catalog: dict[str, UUID], visitor: UserEntity, auth_headers: Headers
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=3), headers=auth_headers(visitor)
        ).json()['data']

        cancelled = client.post(
            f'/api/bookings/{created["id"]}/cancel', headers=auth_headers(visitor)
        )
        again = client.post(f'/api/bookings/{created["id"]}/cancel', headers=auth_headers(visitor))
        availability = client.get(
            f'/api/units/{catalog["event_id"]}/availability', params={'quantity': 3}
        )
        listed = client.get('/api/bookings/my', headers=auth_headers(visitor))

        assert cancelled.status_code == 200
        assert cancelled.json()['data']['bookingStatus'] == 'cancelled'
        assert again.status_code == 400
        assert again.json()['kind'] == 'AlreadyCancelled'
        assert availability.json()['data'] == {
            'unitId': str(catalog['event_id']),
            'quantity': 3,
            'available': True,
            'remaining': 3,
        }
        assert listed.json()['data']['total'] == 1
        assert listed.json()['data']['totalPages'] == 1


@pytest.mark.integration
class TestGateApi:
    def test_visitor_cannot_validate(
        self, client: TestClient, catalog: dict[str, UUID], visitor: UserEntity, auth_headers: Headers
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=1), headers=auth_headers(visitor)
        ).json()['data']

        response = client.post(
            f'/api/tickets/validate/{created["tickets"][0]["ticketCode"]}',
            headers=auth_headers(visitor),
        )

        assert response.status_code == 403
        assert response.json()['kind'] == 'Forbidden'

    def test_admin_validates_qr_once(
        self,
        client: TestClient,
        catalog: dict[str, UUID],
        visitor: UserEntity,
        admin: UserEntity,
        auth_headers: Headers,
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=1), headers=auth_headers(visitor)
        ).json()['data']
        qr_payload = created['tickets'][0]['qrPayload']

        first = client.post(
            '/api/tickets/validate-qr', json={'qrPayload': qr_payload}, headers=auth_headers(admin)
        )
        second = client.post(
            '/api/tickets/validate-qr', json={'qrPayload': qr_payload}, headers=auth_headers(admin)
        )

        assert first.status_code == 200
        assert first.json()['data']['isUsed'] is True
        assert second.status_code == 400
        assert second.json()['kind'] == 'AlreadyUsed'

    def test_tampered_qr_rejected(
        self,
        client: TestClient,
        catalog: dict[str, UUID],
        visitor: UserEntity,
        admin: UserEntity,
        auth_headers: Headers,
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=1), headers=auth_headers(visitor)
        ).json()['data']
        body, _, signature = created['tickets'][0]['qrPayload'].rpartition('.')
        forged = f'{body}.{"0" * len(signature)}'

        response = client.post(
            '/api/tickets/validate-qr', json={'qrPayload': forged}, headers=auth_headers(admin)
        )

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid QR code'

    def test_owner_reads_ticket_by_code(
        self,
        client: TestClient,
        catalog: dict[str, UUID],
        visitor: UserEntity,
        another_visitor: UserEntity,
        auth_headers: Headers,
    ):
        created = client.post(
            '/api/bookings', json=_booking_body(catalog, quantity=1), headers=auth_headers(visitor)
        ).json()['data']
        ticket_code = created['tickets'][0]['ticketCode']

        own = client.get(f'/api/tickets/code/{ticket_code}', headers=auth_headers(visitor))
        other = client.get(f'/api/tickets/code/{ticket_code}', headers=auth_headers(another_visitor))

        assert own.status_code == 200
        assert own.json()['data']['bookingId'] == created['id']
        assert other.status_code == 403


@pytest.mark.integration
def test_health(client: TestClient):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'
