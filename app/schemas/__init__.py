from app.schemas.admin import AuditLogListResponse, AuditLogResponse
from app.schemas.like import (
    LikeCheckResponse,
    LikeCreate,
    LikeListResponse,
    LikeResponse,
    LikeStatsResponse,
    LikeWithProfile,
    SendLikeResponse,
)
from app.schemas.match import CompatibilityResponse, MatchCandidate, MatchFilter, MatchListResponse
from app.schemas.match_preference import MatchPreferenceCreate, MatchPreferenceResponse
from app.schemas.message import (
    BlockCreate,
    BlockResponse,
    CanSendResponse,
    ConversationListResponse,
    ConversationSummary,
    MarkReadRequest,
    MarkReadResponse,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    SendMessageResponse,
    UnreadCountResponse,
)
from app.schemas.notification import (
    NotificationListResponse,
    NotificationResponse,
    NotificationsMarkedRead,
    NotificationUnreadCount,
)
from app.schemas.profile import Gender, ProfileBrief, ProfileCreate, ProfileResponse, ProfileUpdate
from app.schemas.report import (
    ReportAdminListResponse,
    ReportAction,
    ReportAdminResponse,
    ReportCreate,
    ReportResponse,
    ReportReview,
)
from app.schemas.user import (
    EmailCodeIssued,
    EmailVerify,
    Token,
    TokenPayload,
    UserCreate,
    UserLogin,
    UserResponse,
    UserStatus,
)

__all__ = [
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserStatus",
    "Token",
    "TokenPayload",
    "EmailCodeIssued",
    "EmailVerify",
    "Gender",
    "ProfileCreate",
    "ProfileUpdate",
    "ProfileResponse",
    "ProfileBrief",
    "MatchPreferenceCreate",
    "MatchPreferenceResponse",
    "CompatibilityResponse",
    "MatchCandidate",
    "MatchFilter",
    "MatchListResponse",
    "LikeCreate",
    "LikeResponse",
    "LikeWithProfile",
    "LikeListResponse",
    "LikeCheckResponse",
    "LikeStatsResponse",
    "SendLikeResponse",
    "MessageCreate",
    "MessageResponse",
    "MessageListResponse",
    "SendMessageResponse",
    "ConversationSummary",
    "ConversationListResponse",
    "MarkReadRequest",
    "MarkReadResponse",
    "UnreadCountResponse",
    "BlockCreate",
    "BlockResponse",
    "CanSendResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "NotificationUnreadCount",
    "NotificationsMarkedRead",
    "ReportCreate",
    "ReportResponse",
    "ReportAction",
    "ReportAdminResponse",
    "ReportAdminListResponse",
    "ReportReview",
    "AuditLogResponse",
    "AuditLogListResponse",
]
