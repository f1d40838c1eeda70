"""autoapprove — recognise auto-generated pull requests that are safe to approve."""

__version__ = "0.1.0"
