# Paperbot Jobs Module
# ====================
# Scheduling and the tick runner

from .scheduler import JobScheduler, ScheduledJob
from .bot_runner import BotRunner, TICK_JOB_ID

__all__ = [
    "JobScheduler",
    "ScheduledJob",
    "BotRunner",
    "TICK_JOB_ID",
]
