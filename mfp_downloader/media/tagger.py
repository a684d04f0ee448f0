"""
Writes the shared album name and cover art as ID3 tags to downloaded episodes.
"""

import logging
import os

import mutagen.id3 as id3
from mutagen import MutagenError
from mutagen.id3 import ID3NoHeaderError

from mfp_downloader.exceptions import TaggingError

log = logging.getLogger(__name__)

# ID3 picture type for the front cover
FRONT_COVER = 3


class Tagger:
    """Writes metadata tags to MP3 files."""

    def __init__(self, album: str):
        self.album = album

    def tag_file(self, file_path: str, cover_path: str) -> None:
        """
        Sets the album tag and embeds `cover_path` as the front cover.

        Existing pictures are replaced, so tagging the same file repeatedly
        always leaves exactly one cover frame behind.

        Raises:
            TaggingError: If the cover cannot be read or the tag cannot be
            loaded or saved.
        """
        try:
            with open(cover_path, "rb") as f:
                cover_data = f.read()
        except OSError as e:
            raise TaggingError(f"Could not read cover image '{cover_path}': {e}") from e

        try:
            try:
                audio = id3.ID3(file_path)
            except ID3NoHeaderError:
                audio = id3.ID3()

            audio.delall("TALB")
            audio.add(id3.TALB(encoding=3, text=self.album))

            audio.delall("APIC")
            audio.add(
                id3.APIC(
                    encoding=3,
                    mime="image/jpeg",
                    type=FRONT_COVER,
                    desc="Cover",
                    data=cover_data,
                )
            )

            audio.save(filename=file_path, v2_version=3)
        except (MutagenError, OSError) as e:
            raise TaggingError(
                f"Failed to tag file '{os.path.basename(file_path)}': {e}"
            ) from e

        log.debug(f"Tagged '{os.path.basename(file_path)}' with album '{self.album}'")
