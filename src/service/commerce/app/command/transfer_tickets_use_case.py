from typing import List, Optional, Self
from uuid import UUID

from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import InvalidError, NotFoundError, NotPermittedError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.commerce_metrics import metrics
from src.service.commerce.app.dto.order_result import TransferResult
from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.guest_entity import guest_names_for_units
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.enum.guest_enum import GuestStatus
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.value_object.customer_info import CustomerInfo


class TransferTicketsUseCase:
    """
    Move some guests of an order to another person.

    The transferee gets a zero-amount child order holding fresh copies of the
    selected guests (new ticket seeds, so the old QR codes stop working). The
    originals are archived and the parent order is marked transferred. All
    writes happen in one database transaction.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self,
        *,
        order_id: UUID,
        transferee: Optional[CustomerInfo],
        guest_ids: List[UUID],
        updated_by: Optional[str] = None,
    ) -> TransferResult:
        if transferee is None:
            raise InvalidError('No transferee specified')
        if not guest_ids:
            raise InvalidError('No tickets specified')

        new_customer = Customer.create(
            first_name=transferee.first_name,
            last_name=transferee.last_name,
            email=transferee.email,
        )

        with self.tracer.start_as_current_span(
            'use_case.transfer_tickets',
            attributes={'order.id': str(order_id), 'transfer.guest_count': len(guest_ids)},
        ):
            async with self.uow:
                parent = await self.uow.order_command_repo.get_by_id(order_id=order_id)
                if parent is None:
                    raise NotFoundError('Order not found', context={'order_id': str(order_id)})
                parent.ensure_transferable()

                guests = await self.uow.guest_command_repo.get_by_order_and_ids(
                    order_id=order_id, guest_ids=list(dict.fromkeys(guest_ids))
                )
                if not guests:
                    raise NotFoundError('Guests not found', context={'order_id': str(order_id)})
                if any(guest.status == GuestStatus.ARCHIVED for guest in guests):
                    raise NotPermittedError(
                        'Cannot transfer archived guests', context={'order_id': str(order_id)}
                    )
                if any(guest.status != GuestStatus.ACTIVE for guest in guests):
                    raise NotPermittedError(
                        'Cannot transfer checked-in guests', context={'order_id': str(order_id)}
                    )

                stored_transferee = await self.uow.customer_command_repo.upsert_by_email(
                    customer=new_customer
                )
                child = await self.uow.order_command_repo.create_transfer_child(
                    order=Order.create_transfer_child(
                        id=uuid7(), parent=parent, customer_id=stored_transferee.id
                    )
                )

                names = guest_names_for_units(
                    first_name=stored_transferee.first_name,
                    last_name=stored_transferee.last_name,
                    units=len(guests),
                )
                copies = [
                    guest.transfer_copy(
                        order_id=child.id,
                        first_name=first_name,
                        last_name=last_name,
                        created_by=updated_by,
                    )
                    for guest, (first_name, last_name) in zip(guests, names)
                ]
                await self.uow.guest_command_repo.create_many(guests=copies)
                archived = await self.uow.guest_command_repo.archive_active_by_ids(
                    guest_ids=[guest.id for guest in guests], updated_by=updated_by
                )
                if archived != len(guests):
                    # A guest was checked in or archived after it was read
                    raise NotPermittedError(
                        'Cannot transfer checked-in guests', context={'order_id': str(order_id)}
                    )
                updated_parent = await self.uow.order_command_repo.update_status(
                    order_id=parent.id, status=OrderStatus.TRANSFERRED
                )

                await self.uow.commit()

            metrics.record_transfer(guest_count=len(copies), success=True)
            Logger.base.info(
                f'🔁 [TRANSFER] {len(copies)} guests of order {order_id} → '
                f'order {child.id} ({stored_transferee.email})'
            )
            return TransferResult(
                transferee=stored_transferee,
                order=child,
                guest_count=len(copies),
                parent_order=updated_parent or parent.mark_transferred(),
            )
