from app.models.audit_log import AuditAction, AuditLog
from app.models.block import Block
from app.models.conversation import Conversation, ConversationParticipant
from app.models.email_verification import EmailVerificationCode
from app.models.like import Like
from app.models.match_preference import MatchPreference
from app.models.message import Message
from app.models.notification import Notification, NotificationType
from app.models.profile import Profile
from app.models.report import Report
from app.models.user import User

__all__ = [
    "User",
    "Profile",
    "MatchPreference",
    "Like",
    "Conversation",
    "ConversationParticipant",
    "Message",
    "Block",
    "Notification",
    "NotificationType",
    "Report",
    "EmailVerificationCode",
    "AuditLog",
    "AuditAction",
]
