from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class UserRole(str, Enum):
    CITIZEN = 'citizen'
    ADMIN = 'admin'
    MUNICIPAL_WORKER = 'municipal_worker'


class VerificationLevel(str, Enum):
    EMAIL = 'email'
    PHONE = 'phone'
    ID_DOCUMENT = 'id_document'
    BIOMETRIC = 'biometric'


class IssueCategory(str, Enum):
    ROADS = 'Roads'
    LIGHTING = 'Lighting'
    WATER_SUPPLY = 'Water Supply'
    CLEANLINESS = 'Cleanliness'
    PUBLIC_SAFETY = 'Public Safety'
    OBSTRUCTIONS = 'Obstructions'


class IssueStatus(str, Enum):
    REPORTED = 'Reported'
    IN_PROGRESS = 'In Progress'
    RESOLVED = 'Resolved'
    # only reachable through an approved flag
    CLOSED = 'Closed'


# statuses an admin may set directly
ASSIGNABLE_STATUSES = (IssueStatus.REPORTED, IssueStatus.IN_PROGRESS, IssueStatus.RESOLVED)


class FlagReason(str, Enum):
    SPAM = 'Spam'
    INAPPROPRIATE_CONTENT = 'Inappropriate Content'
    FALSE_INFORMATION = 'False Information'
    HARASSMENT = 'Harassment'
    OTHER = 'Other'


class FlagStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class ReviewAction(str, Enum):
    APPROVE = 'approve'
    REJECT = 'reject'


def enum_column(enum_cls: type[Enum], name: str, index: bool = False) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=False,
        index=index,
    )
