"""Remote listing providers for bitbucket-backup."""

from .bitbucket import BitbucketClient, BitbucketError

__all__ = ["BitbucketClient", "BitbucketError"]
