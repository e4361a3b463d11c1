from pydantic import BaseModel, Field


class ProgressChart(BaseModel):
    """Goal titles with their percent progress, in the order goals are listed."""

    labels: list[str] = Field(default_factory=list)
    values: list[int] = Field(default_factory=list)


class DashboardStats(BaseModel):
    """Aggregate numbers shown on the dashboard."""

    total_goals: int = Field(..., ge=0)
    active_milestones: int = Field(..., ge=0, description="Milestones not yet completed")
    logs_this_week: int = Field(..., ge=0, description="Logs created in the last 7 days")
    chart: ProgressChart = Field(default_factory=ProgressChart)
