"""
Entry point that wires the dashboard to the configured AWS account.

Django settings are loaded first: the forms read them, and
``django.setup()`` applies the ``LOGGING`` dict from cartadmin.settings.
"""
import os

import django
from django.apps import apps

import aws_config
from .controller import DashboardController
from .gateway import build_gateway
from .session import SessionGate
from .state import LocalStateStore

SETTINGS_MODULE = "cartadmin.settings"


def configure():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", SETTINGS_MODULE)
    if not apps.ready:
        django.setup()


def build_dashboard(session_factory=None, confirm=None, state_file=None, notifier=None):
    configure()
    gateway = build_gateway(session_factory)
    gate = SessionGate(gateway, admin_email=aws_config.ADMIN_EMAIL)
    store = LocalStateStore(state_file or aws_config.STATE_FILE)
    kwargs = {"notifier": notifier}
    if confirm is not None:
        kwargs["confirm"] = confirm
    return DashboardController(gateway, gate, store, **kwargs)
