"""
Synapse API — Invite Mailer
=============================

What:  Delivers invitation links to approved applicants.
How:   No SMTP integration: the link is written to the log, where operators
       (or a log shipper) pick it up.
"""

import logging

from synapse.config import settings

logger = logging.getLogger(__name__)


def invite_link(token: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/auth/invite?token={token}"


class InviteMailer:
    def send_invite(self, email: str, token: str) -> str:
        link = invite_link(token)
        logger.info("Invite email sent to %s with url to redirect: %s", email, link)
        return link


invite_mailer = InviteMailer()
