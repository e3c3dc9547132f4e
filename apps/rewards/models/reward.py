from django.db import models
from django.conf import settings


class CustomerReward(models.Model):
    """Cached points balance and tier for a customer.

    `points` is the redeemable balance, `total_points` the lifetime total that
    drives the tier. Both always equal the replayed sum of the customer's
    RewardHistory deltas.
    """
    TIER_GREEN = 'GREEN'
    TIER_SILVER = 'SILVER'
    TIER_GOLD = 'GOLD'
    TIER_PLATINUM = 'PLATINUM'

    TIER_CHOICES = [
        (TIER_GREEN, 'Green'),
        (TIER_SILVER, 'Silver'),
        (TIER_GOLD, 'Gold'),
        (TIER_PLATINUM, 'Platinum'),
    ]

    customer = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reward'
    )
    points = models.IntegerField(default=0, help_text="Redeemable balance")
    total_points = models.IntegerField(default=0, help_text="Lifetime points, drives the tier")
    tier = models.CharField(max_length=20, choices=TIER_CHOICES, default=TIER_GREEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customer_rewards'
        verbose_name = 'Customer Reward'
        verbose_name_plural = 'Customer Rewards'
        indexes = [
            models.Index(fields=['tier'], name='customer_rewards_tier_idx'),
        ]

    def __str__(self):
        return f"{self.customer} - {self.points} points ({self.tier})"
