"""ConvoQuota: quota-metered conversational Q&A service."""

__version__ = "0.1.0"
