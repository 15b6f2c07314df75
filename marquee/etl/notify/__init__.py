"""Outbound notifications: alert webhook and run summary email."""

from marquee.etl.notify.notifier import Notifier
from marquee.etl.notify.summary import SummaryMailer, build_summary_email

__all__ = ["Notifier", "SummaryMailer", "build_summary_email"]
