"""
Helpers for reading structured content out of free-form model output.
"""

import re

# Opening fence with an optional language tag, then the block body.
CODE_BLOCK_RE = re.compile(
    r"```[ \t]*[\w+.-]*[ \t]*\r?\n?(.*?)```",
    re.DOTALL,
)


def extract_code_block(text: str) -> str:
    """
    Return the interior of the first fenced code block in text.

    Falls back to the whole text (stripped) when no complete
    block is present.

    Example:
        >>> extract_code_block('Sure:\\n```json\\n{"a": 1}\\n```')
        '{"a": 1}'
        >>> extract_code_block('{"a": 1}')
        '{"a": 1}'
    """
    match = CODE_BLOCK_RE.search(text)
    if match is None:
        return text.strip()
    return match.group(1).strip()
