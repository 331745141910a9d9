"""Split purchase titles into item title and app name."""
import re

from .models import SplitTitle

# In-app purchases carry the app name in brackets: "Gems (Super Game)"
APP_NAME_PATTERN = re.compile(r"\(([^)]+)\)$")
APP_SUFFIX_PATTERN = re.compile(r"\s*\([^)]+\)$")


def split_title(full_title: str) -> SplitTitle:
    """
    Separate the trailing parenthesized app name from a purchase title.

    Only a group at the very end counts; brackets elsewhere in the
    title are left alone.
    """
    match = APP_NAME_PATTERN.search(full_title)
    if not match:
        return SplitTitle(display_title=full_title, app_name="")

    return SplitTitle(
        display_title=APP_SUFFIX_PATTERN.sub("", full_title).strip(),
        app_name=match.group(1)
    )
