from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from portfolio_api.api.deps import get_goals_progress_use_case
from portfolio_api.api.schemas.portfolio import (
    GoalProgressResponse,
    GoalsProgressRequest,
    GoalsProgressResponse,
)
from portfolio_api.api.serializers import iso, portfolio_wallets_from_request, to_float
from portfolio_api.application.dto.portfolio import GoalsProgressInput
from portfolio_api.application.use_cases.get_goals_progress import GetGoalsProgressUseCase
from portfolio_api.domain.exceptions import GoalsInputError
from portfolio_api.shared.clock import utc_now

router = APIRouter()


@router.post("/goals/progress", response_model=GoalsProgressResponse)
def get_goals_progress(
    payload: GoalsProgressRequest,
    use_case: GetGoalsProgressUseCase = Depends(get_goals_progress_use_case),
):
    try:
        result = use_case.execute(
            GoalsProgressInput(
                wallets=portfolio_wallets_from_request(payload.wallets),
                goals={key: Decimal(str(value)) for key, value in payload.goals.items()},
            )
        )
    except GoalsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return GoalsProgressResponse(
        holdings={currency: to_float(amount) for currency, amount in result.holdings.items()},
        goals=[
            GoalProgressResponse(
                currency=row.currency,
                goal=to_float(row.goal),
                current=to_float(row.current),
                progress=to_float(row.progress),
            )
            for row in result.goals
        ],
        fetched_at=iso(utc_now()),
    )
