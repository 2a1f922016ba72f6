"""
Share storage on disk.

Each share is written as a small text file holding its two phrases, so that
shares can be copied, printed or handed out one file at a time.
"""

from pathlib import Path

from .vss import Share


class ShareStore:
    """
    Directory of share files.

    Directory Structure:
        store_dir/
            share-001.txt    # Key phrase, then KeyCheck phrase
            share-002.txt
            ...
    """

    SHARE_PREFIX = "share-"
    SHARE_SUFFIX = ".txt"

    def __init__(self, store_dir: str | Path):
        """Initialize store at specified directory."""
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def share_path(self, index: int) -> Path:
        return self.store_dir / f"{self.SHARE_PREFIX}{index:03d}{self.SHARE_SUFFIX}"

    def share_paths(self) -> list[Path]:
        """All share files in the store, in name order."""
        return sorted(self.store_dir.glob(f"{self.SHARE_PREFIX}*{self.SHARE_SUFFIX}"))

    def save_share(self, share: Share, index: int) -> Path:
        """Save a share as share-<index>.txt, replacing any existing file."""
        path = self.share_path(index)
        with open(path, "w", encoding="utf-8") as f:
            f.write(share.to_text())
        return path

    def save_shares(self, shares: list[Share]) -> list[Path]:
        """Save shares numbered from 1, in list order."""
        return [self.save_share(share, i) for i, share in enumerate(shares, start=1)]

    def load_shares(self) -> list[Share]:
        """Load every share in the store."""
        return [self.load_share(path) for path in self.share_paths()]

    @staticmethod
    def load_share(path: str | Path) -> Share:
        """
        Load a share from a file.

        Raises:
            ShareFormatError: If the file does not hold exactly two phrases
        """
        with open(path, encoding="utf-8") as f:
            return Share.from_text(f.read())
