from revpilot.modules.occupancy.reconciler import (
    OccupancyResult,
    OccupancySummary,
    aggregate_occupancy,
    compute_occupancy,
)

__all__ = ["OccupancyResult", "OccupancySummary", "aggregate_occupancy", "compute_occupancy"]
