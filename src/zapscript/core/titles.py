"""Media title shorthand scanner.

`@System Name/Game Title?key=value` launches a game by system and title.
Text that does not have the `system/title` shape is handed back so the
dispatcher can launch it literally.
"""

from typing import NamedTuple

from zapscript.names import EOF, SYM_ADV_ARG_START, SYM_ESCAPE, SYM_MEDIA_TITLE_SEP

from .arguments import ArgumentsMixin
from .reader import Fallback


class MediaTitle(NamedTuple):
    """Scanned media title segment."""

    #: Trimmed content with escapes decoded.
    content: str
    #: Advanced arguments written after the title.
    adv_args: dict[str, str]
    #: Whether the content has a non-empty system and title.
    valid: bool


class MediaTitleMixin(ArgumentsMixin):
    """Mixin scanning `@system/title` segments."""

    def parse_media_title(self) -> MediaTitle:
        """Read a media title after an already consumed `@`.

        Returns:
            The scanned segment. Invalid content is still returned, with
            `valid` unset.
        """
        buf: list[str] = []
        adv_args: dict[str, str] = {}

        while (ch := self.read()) != EOF:
            if ch == SYM_ESCAPE:
                buf.append(self.read_escaped())
                continue

            if self.check_end_of_cmd(ch):
                break

            if ch == SYM_ADV_ARG_START:
                parsed = self.parse_adv_args()
                if isinstance(parsed, Fallback):
                    buf.append(SYM_ADV_ARG_START + parsed.text)
                    continue

                adv_args = parsed
                break

            buf.append(ch)

        content = ''.join(buf).strip()
        system, separator, title = content.partition(SYM_MEDIA_TITLE_SEP)

        return MediaTitle(
            content=content,
            adv_args=adv_args,
            valid=bool(separator and system.strip() and title.strip()),
        )
