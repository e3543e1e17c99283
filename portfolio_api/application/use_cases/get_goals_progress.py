from __future__ import annotations

from portfolio_api.application.dto.portfolio import GoalsProgressInput, GoalsProgressOutput
from portfolio_api.domain.services.goals import current_holdings, goals_progress


class GetGoalsProgressUseCase:
    def execute(self, command: GoalsProgressInput) -> GoalsProgressOutput:
        rows = goals_progress(command.wallets, command.goals)
        return GoalsProgressOutput(holdings=current_holdings(command.wallets), goals=rows)
