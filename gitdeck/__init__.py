"""gitdeck: batch fetch, pull and push across a workspace of git repositories."""

__version__ = "0.4.0"
