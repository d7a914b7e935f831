"""Date recognition for file names.

extract_date() finds one date in a free-form name and returns it together with
the rest of the name; the rename layer turns that into "yyyy-mm-dd <rest>".
"""

from .types import DateMatch, ExtractPolicy
from .chain import build_canonical_name, extract_date, has_canonical_prefix
from .normalize import is_valid_calendar_date
