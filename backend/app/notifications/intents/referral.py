from __future__ import annotations

from app import models
from app.models import NotificationType
from app.notifications.sink import NotificationEvent, NotificationSink

# (party, rewarded) -> message
_MESSAGES = {
    ("referrer", True): "Your referral was completed. Your reward has been applied.",
    ("referrer", False): "Your referral was completed.",
    ("referred", True): "You completed all referral steps. Your reward has been applied.",
    ("referred", False): "You completed all referral steps.",
}


def send_referral_completed_notifications(
    sink: NotificationSink, referral: models.Referral
) -> None:
    """Notify both parties once a referral reaches ``completed``.

    Only accounts with a row in the reward ledger are told a reward was applied.
    """
    rewarded = {reward.account_id for reward in referral.rewards}
    for party, account_id in (
        ("referrer", referral.referrer_id),
        ("referred", referral.referred_id),
    ):
        if account_id is None:
            continue
        sink.publish(
            account_id,
            NotificationEvent(
                type=NotificationType.REFERRAL_COMPLETED,
                title="Referral Completed",
                message=_MESSAGES[(party, account_id in rewarded)],
                link="/referrals",
                data={"referralId": referral.id, "rewardType": referral.reward_type.value},
            ),
        )
