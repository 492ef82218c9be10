"""Nginx process control and config apply."""

from .change_detector import config_changed
from .commands import NginxCommands
from .controller import ApplyResult, ApplyState, ConfigApplier

__all__ = ['config_changed', 'NginxCommands', 'ApplyResult', 'ApplyState', 'ConfigApplier']
