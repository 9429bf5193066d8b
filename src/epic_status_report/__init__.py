"""Render Jira epics and their linked stories into a markdown status report."""

__version__ = "0.3.0"
