import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomerReward',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points', models.IntegerField(default=0, help_text='Redeemable balance')),
                ('total_points', models.IntegerField(default=0, help_text='Lifetime points, drives the tier')),
                ('tier', models.CharField(choices=[('GREEN', 'Green'), ('SILVER', 'Silver'), ('GOLD', 'Gold'), ('PLATINUM', 'Platinum')], default='GREEN', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='reward', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Customer Reward',
                'verbose_name_plural': 'Customer Rewards',
                'db_table': 'customer_rewards',
                'indexes': [models.Index(fields=['tier'], name='customer_rewards_tier_idx')],
            },
        ),
        migrations.CreateModel(
            name='RewardHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('EARNED', 'Points Earned'), ('REDEEMED', 'Points Redeemed'), ('FAILED', 'Points Not Awarded')], max_length=20)),
                ('points_earned', models.IntegerField(default=0, help_text='Added to the redeemable balance')),
                ('points_redeemed', models.IntegerField(default=0, help_text='Removed from the redeemable balance')),
                ('lifetime_delta', models.IntegerField(default=0, help_text='Change applied to lifetime points')),
                ('order_total', models.IntegerField(default=0)),
                ('description', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reward_history', to=settings.AUTH_USER_MODEL)),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reward_history', to='orders.order')),
                ('reward', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='history', to='rewards.customerreward')),
            ],
            options={
                'verbose_name': 'Reward History',
                'verbose_name_plural': 'Reward History',
                'db_table': 'reward_history',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['customer', 'created_at'], name='reward_history_customer_idx'),
                    models.Index(fields=['action'], name='reward_history_action_idx'),
                ],
            },
        ),
    ]
