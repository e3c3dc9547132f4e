"""
Test configuration for the bakery server.
"""
import os

import pytest


def pytest_configure():
    """Configure Django settings for testing."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'bakery_server.settings.test')


@pytest.fixture
def notifier():
    from tests.doubles import RecordingNotifier
    return RecordingNotifier()


@pytest.fixture
def push_notifier():
    from tests.doubles import RecordingPushNotifier
    return RecordingPushNotifier()


@pytest.fixture
def customer(db):
    from tests.factories import CustomerFactory
    return CustomerFactory()


@pytest.fixture
def staff_user(db):
    from tests.factories import AdminFactory
    return AdminFactory()


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()
