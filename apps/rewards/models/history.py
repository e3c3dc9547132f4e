from django.db import models
from django.conf import settings


class RewardHistory(models.Model):
    """Append-only points ledger"""
    ACTION_EARNED = 'EARNED'
    ACTION_REDEEMED = 'REDEEMED'
    ACTION_FAILED = 'FAILED'

    ACTION_CHOICES = [
        (ACTION_EARNED, 'Points Earned'),
        (ACTION_REDEEMED, 'Points Redeemed'),
        (ACTION_FAILED, 'Points Not Awarded'),
    ]

    reward = models.ForeignKey('CustomerReward', on_delete=models.CASCADE, related_name='history')
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reward_history'
    )
    order = models.ForeignKey(
        'orders.Order', on_delete=models.SET_NULL, null=True, blank=True, related_name='reward_history'
    )
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    points_earned = models.IntegerField(default=0, help_text="Added to the redeemable balance")
    points_redeemed = models.IntegerField(default=0, help_text="Removed from the redeemable balance")
    lifetime_delta = models.IntegerField(default=0, help_text="Change applied to lifetime points")
    order_total = models.IntegerField(default=0)
    description = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'reward_history'
        ordering = ['-created_at', '-id']
        verbose_name = 'Reward History'
        verbose_name_plural = 'Reward History'
        indexes = [
            models.Index(fields=['customer', 'created_at'], name='reward_history_customer_idx'),
            models.Index(fields=['action'], name='reward_history_action_idx'),
        ]

    def __str__(self):
        return f"{self.customer} - {self.action}: {self.description}"

    @property
    def points_delta(self):
        return self.points_earned - self.points_redeemed
