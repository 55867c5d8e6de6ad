"""
ORM models. Importing this package registers every table on Base.metadata
(Alembic's env.py and the test suite rely on that).
"""

from synapse.models.announcement import Announcement
from synapse.models.application import Application, ApplicationStatus
from synapse.models.invite import Invite, InviteStatus
from synapse.models.meeting import Meeting, MeetingAttendance
from synapse.models.membership_payment import MembershipPayment, PaymentStatus
from synapse.models.one_on_one import OneOnOneMeeting
from synapse.models.referral import Referral, ReferralStatus
from synapse.models.thank_you import ThankYou
from synapse.models.user import User, UserRole, UserStatus

__all__ = [
    "Announcement",
    "Application",
    "ApplicationStatus",
    "Invite",
    "InviteStatus",
    "Meeting",
    "MeetingAttendance",
    "MembershipPayment",
    "OneOnOneMeeting",
    "PaymentStatus",
    "Referral",
    "ReferralStatus",
    "ThankYou",
    "User",
    "UserRole",
    "UserStatus",
]
