from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth import get_user_model

from .services import RewardService

Customer = get_user_model()


@receiver(post_save, sender=Customer)
def create_reward_for_new_customer(sender, instance, created, **kwargs):
    """Every new customer starts on the entry tier with an empty balance"""
    if created:
        RewardService.get_or_create_reward(instance)
