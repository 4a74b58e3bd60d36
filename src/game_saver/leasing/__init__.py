"""Time-boxed leasing of online game accounts."""

from game_saver.leasing.models import AccountStatus
from game_saver.leasing.service import LeaseService
from game_saver.leasing.validation import validate_lease_hours


__all__ = ["AccountStatus", "LeaseService", "validate_lease_hours"]
