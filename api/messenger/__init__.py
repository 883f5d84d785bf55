"""Issue tracker change notifications for Discord and Slack-compatible webhooks."""

__version__ = "0.1.0"
