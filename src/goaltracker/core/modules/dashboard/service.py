from datetime import timedelta
from uuid import UUID

from goaltracker.core.core import Service
from goaltracker.core.modules.dashboard.models import DashboardStats, ProgressChart
from goaltracker.utils import now

WEEK = timedelta(days=7)


class DashboardService(Service):
    """Aggregates the owner's goals, milestones and logs."""

    async def get_stats(self, owner_id: UUID) -> DashboardStats:
        services = self.core.services
        goals = await services.goal.list_goals(owner_id)
        active_goals = [goal for goal in goals if not goal.archived]
        return DashboardStats(
            total_goals=len(goals),
            active_milestones=await services.milestone.count_active_milestones(owner_id),
            logs_this_week=await services.progress_log.count_logs_since(owner_id, now() - WEEK),
            chart=ProgressChart(
                labels=[goal.title for goal in active_goals],
                values=[goal.progress for goal in active_goals],
            ),
        )
