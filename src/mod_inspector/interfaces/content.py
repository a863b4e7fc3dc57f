"""Abstract interface for archive content access."""

from typing import Protocol


class ContentProvider(Protocol):
    """Read access to the files of opened archives.

    Implementations must be idempotent for a given archive snapshot:
    asking twice for the same path returns the same answer.
    """

    async def get(self, archive_id: str, path: str) -> str | None:
        """
        Fetch the decoded text of one archive entry.

        Args:
            archive_id: Identity of the archive
            path: Entry path, possibly shorter than the stored path

        Returns:
            Decoded text, or None if the archive has no such file
        """
        ...
