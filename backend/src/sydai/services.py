"""Explicit wiring of the application services.

All services share one ``Database`` and one clock. Build the container
once per application (or per test) with ``build_services`` and tear it
down with ``Services.close``.
"""

from dataclasses import dataclass

from sydai.auth.local import LocalAuthService
from sydai.auth.points import PointsLedger
from sydai.checkin.service import CheckinService
from sydai.leaderboard.service import LeaderboardService
from sydai.messages.service import MessageService, random_response
from sydai.notifications.service import NotificationService
from sydai.preferences.service import PreferencesService
from sydai.referral.service import ReferralService
from sydai.settings import Settings
from sydai.storage.db import Database
from sydai.storage.models import Clock, utcnow


@dataclass
class Services:
    config: Settings
    db: Database
    ledger: PointsLedger
    auth: LocalAuthService
    notifications: NotificationService
    checkin: CheckinService
    referral: ReferralService
    leaderboard: LeaderboardService
    messages: MessageService
    preferences: PreferencesService

    def close(self) -> None:
        self.db.dispose()


def build_services(
    db: Database,
    config: Settings,
    clock: Clock = utcnow,
    responder=random_response,
) -> Services:
    """Construct every service on top of one database."""
    ledger = PointsLedger(db)
    notifications = NotificationService(db, clock=clock)

    return Services(
        config=config,
        db=db,
        ledger=ledger,
        auth=LocalAuthService(db, config),
        notifications=notifications,
        checkin=CheckinService(ledger, notifications, clock=clock),
        referral=ReferralService(
            db,
            ledger,
            notifications,
            base_url=config.public_base_url,
            clock=clock,
        ),
        leaderboard=LeaderboardService(db),
        messages=MessageService(db, ledger, responder=responder, clock=clock),
        preferences=PreferencesService(db),
    )
