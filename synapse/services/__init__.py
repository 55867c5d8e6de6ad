# Services package init
"""
Synapse API — Services Layer
==============================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Each service is a stateless singleton. Methods receive the request's
       AsyncSession, flush their writes and return Pydantic response models.

Service Inventory:
    - UserService / AuthService: members, credentials, tokens
    - ApplicationService → InviteService → InviteMailer: the onboarding flow
    - AnnouncementService, MeetingService, OneOnOneMeetingService
    - ReferralService, ThankYouService, MembershipPaymentService
    - pagination.paginate: shared offset pagination for every list endpoint
"""
