from .send_reminders_use_case import (
    SendBandwidthRemindersUseCase,
    SendOverdueTaskRemindersUseCase,
    next_period,
)

__all__ = ["SendBandwidthRemindersUseCase", "SendOverdueTaskRemindersUseCase", "next_period"]
