from __future__ import annotations

import itertools
import os
from pathlib import Path
from typing import Iterator, Union

from clipnote import config
from clipnote import logger as logger_mod
from clipnote.helpers import safe_note_filename

log = logger_mod.get_logger()


class NoteWriter:
    """Write generated notes as markdown files under one output directory."""

    def __init__(self, output_path: Union[str, Path] = config.OUTPUT_PATH):
        self.output_path = Path(output_path)

    def _candidates(self, title: str) -> Iterator[Path]:
        """`<title>.md`, then `<title> (1).md`, `<title> (2).md`, ..."""
        stem = safe_note_filename(title, max_length=config.API_LIMITS.title_max_length)
        yield self.output_path / f"{stem}.md"
        for n in itertools.count(1):
            yield self.output_path / f"{stem} ({n}).md"

    def note_path(self, title: str) -> Path:
        """First candidate name that does not exist yet."""
        return next(c for c in self._candidates(title) if not c.exists())

    def save(self, title: str, content: str) -> Path:
        os.makedirs(self.output_path, exist_ok=True)
        if not content.endswith("\n"):
            content += "\n"

        # "x" refuses to clobber a file created after its name was picked
        for path in self._candidates(title):
            try:
                with open(path, "x", encoding="utf-8") as f:
                    f.write(content)
            except FileExistsError:
                log.debug(f"Note already exists, trying next name: {path}")
                continue
            log.info(f"✅ Saved note: {path}")
            return path
