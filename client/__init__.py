"""
Python client for the finance API: session persistence, HTTP access and
page components driving a presentation layer.
"""

from client.api import ApiClient
from client.pages import AuthPage, DashboardPage, GoalsPage, TransactionsPage
from client.session import Session
from client.ui import Chart, Navigator, Notifier, RequestSequencer

__all__ = [
    'ApiClient',
    'AuthPage',
    'Chart',
    'DashboardPage',
    'GoalsPage',
    'Navigator',
    'Notifier',
    'RequestSequencer',
    'Session',
    'TransactionsPage',
]
