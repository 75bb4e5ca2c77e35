"""Concourse out resource that posts messages and files to Slack."""

__version__ = "1.0.0"
