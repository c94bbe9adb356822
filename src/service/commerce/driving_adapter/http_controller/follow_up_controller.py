from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.command.process_follow_up_tasks_use_case import (
    ProcessFollowUpTasksUseCase,
)
from src.service.commerce.driving_adapter.http_controller.auth.operator_auth import (
    Operator,
    require_admin,
)
from src.service.commerce.driving_adapter.http_controller.schema.ticket_schema import (
    FollowUpRetryRequest,
    FollowUpRunResponse,
)


router = APIRouter()


@router.post('/retry')
@Logger.io
async def retry_follow_up_tasks(
    request: FollowUpRetryRequest,
    operator: Operator = Depends(require_admin),
    use_case: ProcessFollowUpTasksUseCase = Depends(ProcessFollowUpTasksUseCase.depends),
) -> FollowUpRunResponse:
    """Re-run pending and failed guest fan-out / roll-over tasks, optionally for one order."""
    result = await use_case.execute(order_id=request.order_id)
    return FollowUpRunResponse(done=result.done, failed=result.failed, skipped=result.skipped)
