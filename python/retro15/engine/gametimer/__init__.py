from retro15.engine.gametimer.timer import (
    BEST_TIME_SENTINEL,
    RecurringTask,
    TimerController,
    format_time,
)

__all__ = ["BEST_TIME_SENTINEL", "RecurringTask", "TimerController", "format_time"]
