from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.commerce_metrics import metrics
from src.platform.observability.tracing import extract_trace_context
from src.service.commerce.app.dto.follow_up_result import FollowUpRunResult
from src.service.commerce.domain.entity.follow_up_task_entity import FollowUpTask
from src.service.commerce.domain.entity.guest_entity import Guest, guest_names_for_units
from src.service.commerce.domain.enum.guest_enum import CreatedReason
from src.service.commerce.domain.enum.payment_enum import FollowUpTaskKind
from src.service.commerce.domain.inventory_domain import InventoryRollOver


class ProcessFollowUpTasksUseCase:
    """
    Run the work a paid order still owes (guest fan-out, inventory roll-over).

    Each task runs in its own transaction together with being marked done, so a
    task either fully happened or can be retried from scratch. Failures are
    recorded on the task and never touch the order.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.max_attempts = settings.FOLLOW_UP_MAX_ATTEMPTS
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work_factory]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, order_id: Optional[UUID] = None, limit: int = 100) -> FollowUpRunResult:
        async with self.uow_factory() as uow:
            candidates = await uow.follow_up_task_repo.list_runnable(
                order_id=order_id, max_attempts=self.max_attempts, limit=limit
            )

        done = failed = skipped = 0
        for candidate in candidates:
            outcome = await self._run_one(candidate=candidate)
            if outcome is None:
                skipped += 1
            elif outcome:
                done += 1
            else:
                failed += 1

        if candidates:
            Logger.base.info(
                f'📦 [FOLLOW-UP] done={done} failed={failed} skipped={skipped}'
                + (f' (order {order_id})' if order_id else '')
            )
        return FollowUpRunResult(done=done, failed=failed, skipped=skipped)

    async def _run_one(self, *, candidate: FollowUpTask) -> Optional[bool]:
        ctx = extract_trace_context(carrier=candidate.payload.get('trace_context'))
        with self.tracer.start_as_current_span(
            'follow_up.run',
            context=ctx,
            attributes={'task.kind': candidate.kind.value, 'order.id': str(candidate.order_id)},
        ):
            locked = None
            try:
                async with self.uow_factory() as uow:
                    locked = await uow.follow_up_task_repo.get_runnable(
                        task_id=candidate.id, max_attempts=self.max_attempts
                    )
                    if locked is None:
                        return None

                    await self._handle(uow=uow, task=locked)
                    await uow.follow_up_task_repo.save(task=locked.mark_done())
                    await uow.commit()
            except Exception as e:
                Logger.base.error(
                    f'❌ [FOLLOW-UP] {candidate.kind.value} for order {candidate.order_id} '
                    f'failed: {e}'
                )
                metrics.record_follow_up_task(kind=candidate.kind.value, success=False)
                async with self.uow_factory() as uow:
                    await uow.follow_up_task_repo.save(
                        task=(locked or candidate).mark_failed(error=str(e) or type(e).__name__)
                    )
                    await uow.commit()
                return False

            metrics.record_follow_up_task(kind=candidate.kind.value, success=True)
            return True

    async def _handle(self, *, uow: AbstractUnitOfWork, task: FollowUpTask) -> None:
        if task.kind == FollowUpTaskKind.CREATE_PURCHASE_GUESTS:
            await self._create_purchase_guests(uow=uow, task=task)
        elif task.kind == FollowUpTaskKind.ROLL_OVER_INVENTORY:
            await self._roll_over_inventory(uow=uow, task=task)
        else:
            raise ValueError(f'Unknown follow-up task kind: {task.kind}')

    @staticmethod
    async def _create_purchase_guests(*, uow: AbstractUnitOfWork, task: FollowUpTask) -> None:
        order = await uow.order_command_repo.get_by_id(order_id=task.order_id)
        if order is None:
            raise NotFoundError('Order not found', context={'order_id': str(task.order_id)})
        customer = await uow.customer_command_repo.get_by_id(customer_id=order.customer_id)
        if customer is None:
            raise NotFoundError(
                'Customer not found', context={'customer_id': str(order.customer_id)}
            )

        products = {
            product.id: product
            for product in await uow.catalog_query_repo.get_products(
                product_ids=[item.product_id for item in order.items]
            )
        }

        guests = []
        for item in order.items:
            product = products.get(item.product_id)
            if product is None or not product.type.issues_guests:
                continue
            if product.event_id is None or product.admission_tier is None:
                raise ValueError(f'Ticket product {product.id} has no event or admission tier')

            for first_name, last_name in guest_names_for_units(
                first_name=customer.first_name, last_name=customer.last_name, units=item.quantity
            ):
                guests.append(
                    Guest.create(
                        first_name=first_name,
                        last_name=last_name,
                        event_id=product.event_id,
                        admission_tier=product.admission_tier,
                        created_reason=CreatedReason.PURCHASE,
                        order_id=order.id,
                    )
                )

        await uow.guest_command_repo.create_many(guests=guests)
        Logger.base.info(f'🎫 [FOLLOW-UP] Created {len(guests)} guests for order {order.id}')

    @staticmethod
    async def _roll_over_inventory(*, uow: AbstractUnitOfWork, task: FollowUpTask) -> None:
        for raw_product_id in task.payload.get('product_ids', []):
            product = await uow.inventory_command_repo.get_product(product_id=UUID(raw_product_id))
            if product is None:
                continue

            total_sold = await uow.inventory_command_repo.get_total_sold(product_id=product.id)
            plan = InventoryRollOver.evaluate(product=product, total_sold=total_sold)
            if plan is None:
                continue

            await uow.inventory_command_repo.archive_product(product_id=plan.sold_out_product_id)
            Logger.base.info(
                f'📉 [ROLL-OVER] Product {product.id} sold out ({total_sold}/{product.max_quantity})'
            )

            if plan.successor_product_id is not None:
                await uow.inventory_command_repo.activate_product(
                    product_id=plan.successor_product_id
                )
                if plan.event_id is not None:
                    await uow.inventory_command_repo.set_event_current_ticket(
                        event_id=plan.event_id, product_id=plan.successor_product_id
                    )
                Logger.base.info(
                    f'📈 [ROLL-OVER] Product {plan.successor_product_id} now on sale'
                )
