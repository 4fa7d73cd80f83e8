"""Tag filter parsing.

Commands that select media by tags take a `tags` advanced argument
holding a comma-separated list of `type:value` filters, each optionally
prefixed with an operator: `+` (AND, the default), `-` (NOT) or `~` (OR).

Both halves of a filter are normalized so user spelling differences
(case, spacing, punctuation) do not affect matching.
"""

from enum import StrEnum
from re import compile as regexp

from pydantic import Field

from zapscript.errors import TagFilterError
from zapscript.models import SchemaModel
from zapscript.names import SYM_TAG_AND, SYM_TAG_NOT, SYM_TAG_OR

COLON_SPACING = regexp(r'\s*:\s*')
SPECIAL_CHARS = regexp(r'[^a-z0-9:,+\-]')


class TagOperator(StrEnum):
    """Logical operator of a tag filter."""

    AND = 'AND'
    NOT = 'NOT'
    OR = 'OR'


#: Operator prefixes recognized in front of a filter.
OPERATOR_PREFIXES = {
    SYM_TAG_AND: TagOperator.AND,
    SYM_TAG_NOT: TagOperator.NOT,
    SYM_TAG_OR: TagOperator.OR,
}


class TagFilter(SchemaModel):
    """Normalized filter matching media by one tag."""

    type: str = Field(
        min_length=1,
        title='Tag type',
        examples=['region', 'lang'],
    )

    value: str = Field(
        min_length=1,
        title='Tag value',
        examples=['usa', 'en'],
    )

    operator: TagOperator = Field(
        default=TagOperator.AND,
        title='Operator',
        description='`AND` requires the tag, `NOT` excludes it, `OR` groups alternatives.',
    )


def normalize_tag(value: str) -> str:
    """Normalize a tag type or value for consistent matching.

    Trims the text, removes spaces around colons, lowercases it, turns
    spaces and periods into dashes and drops everything except ASCII
    letters, digits, colons, commas, pluses and dashes.

    Args:
        value: Raw tag text.

    Returns:
        Normalized text, possibly empty.
    """
    value = COLON_SPACING.sub(':', value.strip())
    value = value.lower().replace(' ', '-').replace('.', '-')

    return SPECIAL_CHARS.sub('', value)


def parse_tag_filters(raw: str) -> tuple[TagFilter, ...]:
    """Parse a comma-separated tag filter list.

    Empty entries are skipped and duplicates (same type, value and
    operator) are dropped, keeping the first occurrence.

    Args:
        raw: Filter list such as `region:usa,-unfinished:demo,~lang:en`.

    Returns:
        Parsed filters in input order.

    Raises:
        TagFilterError: If an entry lacks a colon, or its type or value
            is empty after normalization.
    """
    filters: dict[tuple[str, str, TagOperator], TagFilter] = {}

    for entry in raw.split(','):
        text = entry.strip()
        if not text:
            continue

        operator = TagOperator.AND
        if text[0] in OPERATOR_PREFIXES:
            operator = OPERATOR_PREFIXES[text[0]]
            text = text[1:]

        tag_type, colon, tag_value = text.partition(':')
        if not colon:
            raise TagFilterError(
                f'invalid tag format for {entry!r}: must be in "type:value" format',
            )

        tag_type = normalize_tag(tag_type)
        tag_value = normalize_tag(tag_value)
        if not tag_type or not tag_value:
            raise TagFilterError(
                f'invalid tag {entry!r}: type and value cannot be empty after normalization',
            )

        key = (tag_type, tag_value, operator)
        if key not in filters:
            filters[key] = TagFilter(type=tag_type, value=tag_value, operator=operator)

    return tuple(filters.values())
