"""
HMAC Ticket Issuer

QR payload layout: base64(record) + "." + hex(hmac_sha256(secret, record))
where record is the orjson serialization of {code, ref, date, park, ts} with
sorted keys, so the same ticket always serializes to the same bytes.
"""

import base64
import binascii
import hashlib
import hmac
import secrets
import time
from typing import Optional

import orjson
from pydantic import SecretStr

from src.platform.exception.exceptions import ConfigurationError, InvalidQrPayloadError
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.interface.i_ticket_issuer import ITicketIssuer
from src.service.park_ticketing.domain.value_object.qr_payload import IssuedTicket, QrPayload


TICKET_CODE_RANDOM_BYTES = 8


class HmacTicketIssuer(ITicketIssuer):
    def __init__(
        self,
        *,
        signing_secret: Optional[SecretStr | str],
        park_identifier: str,
        code_prefix: str = 'TKT',
        max_age_seconds: Optional[int] = None,
    ) -> None:
        if isinstance(signing_secret, SecretStr):
            signing_secret = signing_secret.get_secret_value()
        if not signing_secret:
            raise ConfigurationError('TICKET_SIGNING_SECRET is not set; refusing to issue tickets')

        self._key = signing_secret.encode()
        self.park_identifier = park_identifier
        self.code_prefix = code_prefix
        self.max_age_seconds = max_age_seconds

    def __repr__(self) -> str:
        return f'HmacTicketIssuer(park_identifier={self.park_identifier!r})'

    def _sign(self, record_bytes: bytes) -> str:
        return hmac.new(self._key, record_bytes, hashlib.sha256).hexdigest()

    def generate_ticket_code(self) -> str:
        return f'{self.code_prefix}-{secrets.token_hex(TICKET_CODE_RANDOM_BYTES).upper()}'

    def encode(self, payload: QrPayload) -> str:
        record_bytes = orjson.dumps(payload.to_record(), option=orjson.OPT_SORT_KEYS)
        encoded = base64.b64encode(record_bytes).decode('ascii')
        return f'{encoded}.{self._sign(record_bytes)}'

    def issue_ticket(self, *, booking_reference: str, unit_date: Optional[str]) -> IssuedTicket:
        ticket_code = self.generate_ticket_code()
        payload = QrPayload(
            ticket_code=ticket_code,
            booking_reference=booking_reference,
            unit_date=unit_date,
            park=self.park_identifier,
            issued_at_ms=int(time.time() * 1000),
        )
        return IssuedTicket(ticket_code=ticket_code, qr_payload=self.encode(payload))

    @Logger.io
    def verify(self, qr_payload: str) -> QrPayload:
        encoded, sep, signature = qr_payload.strip().rpartition('.')
        if not sep or not encoded or not signature:
            raise InvalidQrPayloadError()

        try:
            record_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidQrPayloadError()
        # Reject alternative encodings of the same bytes
        if base64.b64encode(record_bytes).decode('ascii') != encoded:
            raise InvalidQrPayloadError()

        if not hmac.compare_digest(self._sign(record_bytes).encode(), signature.encode()):
            raise InvalidQrPayloadError()

        try:
            payload = QrPayload.from_record(orjson.loads(record_bytes))
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError):
            raise InvalidQrPayloadError()

        if payload.park != self.park_identifier:
            raise InvalidQrPayloadError('QR code was issued by a different park')

        if self.max_age_seconds is not None:
            age_ms = int(time.time() * 1000) - payload.issued_at_ms
            if age_ms > self.max_age_seconds * 1000:
                raise InvalidQrPayloadError('QR code has expired')

        return payload
