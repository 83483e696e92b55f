"""
Database models package.

Other modules can import from here: `from alert_api.models import Alert`
"""

from alert_api.models.alert import Alert

__all__ = [
    "Alert",
]
