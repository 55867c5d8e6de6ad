# Routes package init
"""
Synapse API — API Routes Package
==================================

What:  HTTP route handlers, one module per resource.

Route Inventory:
    - auth.py                 /api/auth               login, refresh, me
    - users.py                /api/users              members (admin writes)
    - applications.py         /api/applications       public form + review
    - invites.py              /api/invites            onboarding tokens
    - announcements.py        /api/announcements
    - meetings.py             /api/meetings           meetings + attendance
    - one_on_ones.py          /api/one-on-one-meetings
    - referrals.py            /api/referrals
    - thank_yous.py           /api/thank-you
    - membership_payments.py  /api/membership-payments
    - health.py               /health

Routes are thin: parse the request, resolve the caller, call one service
method, pick the status code. Business rules live in services.
"""
