"""
Ticket Issuer

Turns a captured order into one ticket per purchased unit.

    ticket_number   = ST-<last 8 hex of order id>-<base36 epoch ms>-<seq>
    redemption_code = STTKT-<first 16 hex of sha256(order_id:index:16 random bytes)>

The order id part is the random tail of the UUID7; its leading hex is the
creation timestamp, which is shared by orders created in the same millisecond.

Both columns are unique. A collision surfaces as IntegrityError at flush; the
caller rolls the whole unit back and retries with freshly generated codes.
"""

from datetime import datetime
import hashlib
import secrets
from typing import List
from uuid import UUID

from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.domain.entity.order_entity import Order
from src.service.event_booking.domain.entity.ticket_entity import AttendeeProfile, TicketEntity
from src.service.event_booking.domain.enum.ticket_status import TicketStatus


_BASE36_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(value: int) -> str:
    if value == 0:
        return '0'
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def generate_ticket_number(*, order_id: UUID, issued_at: datetime, sequence: int) -> str:
    epoch_ms = int(issued_at.timestamp() * 1000)
    return f'ST-{order_id.hex[-8:]}-{to_base36(epoch_ms)}-{sequence}'.upper()


def generate_redemption_code(*, order_id: UUID, index: int) -> str:
    nonce = secrets.token_bytes(16)
    digest = hashlib.sha256(f'{order_id}:{index}:'.encode() + nonce).hexdigest()
    return f'STTKT-{digest[:16]}'.upper()


class TicketIssuer:
    def build_tickets(
        self, *, order: Order, attendee: AttendeeProfile, issued_at: datetime
    ) -> List[TicketEntity]:
        tickets: List[TicketEntity] = []
        index = 0
        for item in order.items:
            for _ in range(item.quantity):
                tickets.append(
                    TicketEntity(
                        id=uuid7(),
                        order_id=order.id,
                        event_id=order.event_id,
                        ticket_category_id=item.ticket_category_id,
                        user_id=order.user_id,
                        ticket_number=generate_ticket_number(
                            order_id=order.id, issued_at=issued_at, sequence=index + 1
                        ),
                        redemption_code=generate_redemption_code(order_id=order.id, index=index),
                        attendee_name=attendee.name,
                        attendee_email=attendee.email,
                        attendee_phone=attendee.phone,
                        status=TicketStatus.VALID,
                        created_at=issued_at,
                    )
                )
                index += 1
        return tickets

    @Logger.io
    async def issue_tickets(
        self, *, uow: AbstractUnitOfWork, order: Order, issued_at: datetime
    ) -> List[TicketEntity]:
        """
        Insert the tickets of a captured order inside the caller's unit of work

        Raises:
            sqlalchemy.exc.IntegrityError: ticket_number or redemption_code collided
        """
        profile = await uow.user_profile_query_repo.get_by_id(user_id=order.user_id)
        attendee = profile.to_attendee() if profile else AttendeeProfile()

        tickets = self.build_tickets(order=order, attendee=attendee, issued_at=issued_at)
        await uow.ticket_command_repo.create_tickets(tickets=tickets)

        Logger.base.info(
            f'🎟️ [ISSUE] Issued {len(tickets)} tickets for order {order.order_number}'
        )
        return tickets
