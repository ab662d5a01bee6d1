from pydantic import BaseModel


class PublishRequest(BaseModel):
    dry_run: bool = False
    """Return the pages that would be published without calling the CMS."""

    retry_failed: bool = False
    """Only re-attempt approved pages whose last publish failed."""
