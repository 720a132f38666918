"""Incremental extraction of proposals from streamed model text.

Models are asked to put shell commands in ```bash fences and file edits
in ```diff fences. The extractor is fed text as it streams and hands back
a draft for every fenced block as soon as the block is closed.
"""

import re

from loguru import logger

from ..actions import ActionKind
from .models import ActionDraft

FENCE_PATTERN = re.compile(r"```([\w+-]*)[^\n]*\n(.*?)```", re.DOTALL)
COMMAND_LANGUAGES = {"bash", "sh", "shell", "console", "zsh"}
PATCH_LANGUAGES = {"diff", "patch", "udiff"}


class ProposalExtractor:
    """Turns completed fenced blocks into action drafts."""

    def __init__(self) -> None:
        self._buffer = ""
        self._position = 0

    @property
    def text(self) -> str:
        """Everything fed so far."""
        return self._buffer

    def feed(self, chunk: str) -> list[ActionDraft]:
        """Add streamed text; return drafts for blocks closed by it."""
        self._buffer += chunk
        drafts = []
        while (match := FENCE_PATTERN.search(self._buffer, self._position)) is not None:
            self._position = match.end()
            language, body = match.group(1).lower(), match.group(2)
            if language in COMMAND_LANGUAGES:
                drafts.extend(command_drafts(body))
            elif language in PATCH_LANGUAGES:
                drafts.extend(patch_drafts(body))
        return drafts


def command_drafts(body: str) -> list[ActionDraft]:
    """One command draft per non-empty, non-comment line."""
    drafts = []
    for line in body.splitlines():
        command = line.strip()
        if command.startswith("$ "):
            command = command[2:].strip()
        if command and not command.startswith("#"):
            drafts.append(ActionDraft(kind=ActionKind.COMMAND, command=command))
    return drafts


def patch_drafts(body: str) -> list[ActionDraft]:
    """One patch draft per file section of a unified diff.

    A section starts at a ``---`` line immediately followed by ``+++``.
    Sections without usable headers are dropped.
    """
    lines = body.splitlines(keepends=True)
    starts = [
        i for i in range(len(lines) - 1)
        if lines[i].startswith("--- ") and lines[i + 1].startswith("+++ ")
    ]
    if not starts:
        logger.debug("Ignoring diff block without ---/+++ headers")
        return []

    drafts = []
    for n, start in enumerate(starts):
        end = starts[n + 1] if n + 1 < len(starts) else len(lines)
        section = "".join(lines[start:end])
        file_name = patch_target(lines[start], lines[start + 1])
        if file_name is None:
            logger.debug("Ignoring diff section without a target file")
            continue
        drafts.append(ActionDraft(
            kind=ActionKind.FILE_PATCH,
            diff_string=section,
            file_name=file_name,
        ))
    return drafts


def patch_target(old_header: str, new_header: str) -> str | None:
    """Target file of a diff section; the new side wins unless it is /dev/null."""
    for header in (new_header, old_header):
        path = header[4:].split("\t")[0].strip()
        if path and path != "/dev/null":
            if path.startswith(("a/", "b/")):
                path = path[2:]
            return path
    return None
