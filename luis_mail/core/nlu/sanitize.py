import re

# Comments may contain '>', so they are removed before tags
_COMMENT = re.compile(r"<!--.*?(?:-->|$)", re.S)
# An unterminated tag runs to the end of the string
_TAG = re.compile(r"<[^>]*>?")
_BRACKET = re.compile(r"[<>]")


def strip_tags(text: str | None) -> str:
    """Remove HTML/XML tags, comments and any stray angle brackets from email text."""
    if not text:
        return ""
    return _BRACKET.sub("", _TAG.sub("", _COMMENT.sub("", text)))
