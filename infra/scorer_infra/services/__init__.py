from .schedule_status_checker import ScheduleStatusChecker, ScheduledTaskStatus
