"""
Services package exports.
"""
from .schedule_service import ScheduleService, ScheduleSnapshot
from .standings_service import StandingsService

__all__ = ["ScheduleService", "ScheduleSnapshot", "StandingsService"]
