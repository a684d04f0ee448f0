"""
Decides whether a downloaded episode is complete, needs its tags repaired, or
has to be downloaded again.
"""

import logging
import os
from enum import Enum

from mutagen import MutagenError
from mutagen.id3 import ID3, ID3NoHeaderError

log = logging.getLogger(__name__)


class Completion(Enum):
    """The action an existing (or missing) target file requires."""

    COMPLETE = "complete"
    NEEDS_RETAG = "needs_retag"
    NEEDS_DOWNLOAD = "needs_download"


class CompletionChecker:
    """
    Read-only inspection of target files.

    The authoritative signal is the metadata: a file carrying the expected
    album tag and at least one embedded picture is complete. The optional size
    check only ever detects truncated bodies; a missing expected size is
    inconclusive and never counts against the file.
    """

    def __init__(self, album: str, verify_size: bool = False):
        self.album = album
        self.verify_size = verify_size

    def has_expected_metadata(self, filepath: str) -> bool:
        """
        Checks the album tag and the presence of a cover frame.

        Args:
            filepath: Path to the MP3 file.

        Returns:
            True if the album matches and a picture is attached. A file
            without any ID3 tag returns False.

        Raises:
            MutagenError: If the tag exists but cannot be parsed.
            OSError: If the file cannot be read.
        """
        try:
            tags = ID3(filepath)
        except ID3NoHeaderError:
            return False

        album_frame = tags.get("TALB")
        if album_frame is None or not album_frame.text:
            return False
        if str(album_frame.text[0]) != self.album:
            return False
        return bool(tags.getall("APIC"))

    def assess(self, filepath: str, expected_size: int | None = None) -> Completion:
        """
        Classifies a target file.

        Args:
            filepath: Path to the target MP3 file.
            expected_size: Byte length declared by the feed or the server, if
                known. Only consulted when size verification is enabled.
        """
        if not os.path.isfile(filepath):
            return Completion.NEEDS_DOWNLOAD

        if self.verify_size and expected_size:
            actual_size = os.path.getsize(filepath)
            # Tagging only grows a file, so only a short file is conclusive.
            if actual_size < expected_size:
                log.warning(
                    f"'{os.path.basename(filepath)}' is truncated "
                    f"({actual_size} of {expected_size} bytes)."
                )
                return Completion.NEEDS_DOWNLOAD

        try:
            if self.has_expected_metadata(filepath):
                return Completion.COMPLETE
        except (MutagenError, OSError) as e:
            log.warning(
                f"Unreadable metadata in '{os.path.basename(filepath)}', "
                f"downloading again: {e}"
            )
            return Completion.NEEDS_DOWNLOAD

        return Completion.NEEDS_RETAG

    def is_complete(self, filepath: str, expected_size: int | None = None) -> bool:
        """True if the file exists and is fully tagged."""
        return self.assess(filepath, expected_size) is Completion.COMPLETE
