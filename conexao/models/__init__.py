# Importar todos os models
from .member import Member
from .report import Report
from .moderation_action import ModerationAction
from .badge import Badge, BadgeType, BADGE_CATALOG
from .activity import RitualLog, Event, EventAttendee, Live, Comment

__all__ = [
    'Member', 'Report', 'ModerationAction', 'Badge', 'BadgeType', 'BADGE_CATALOG',
    'RitualLog', 'Event', 'EventAttendee', 'Live', 'Comment',
]
