import re
from datetime import datetime, timezone
from typing import List, Optional, Union


def current_time() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_slug(value: str) -> str:
    return re.sub(r'\s+', '-', value.strip().lower())


def slugify(value: str) -> str:
    """Lowercase, dash-separated slug with every non-word character dropped."""
    return re.sub(r'[^\w-]', '', normalize_slug(value))


def split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [i.strip() for i in value.split(',') if i.strip()]


def join_list(value: Optional[Union[str, List[str]]]) -> Optional[str]:
    if isinstance(value, list):
        return ','.join(v.strip() for v in value if v and v.strip())
    return value
