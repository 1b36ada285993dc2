"""Inbox job-lead scanner and application tracker."""

__version__ = "0.3.0"
