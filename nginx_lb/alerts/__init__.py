"""Failure alerting."""

from .notifier import SlackNotifier

__all__ = ['SlackNotifier']
