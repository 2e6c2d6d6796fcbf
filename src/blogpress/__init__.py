"""BlogPress: verified submissions, moderation and reader interactions for a blog."""

__version__ = "0.1.0"
