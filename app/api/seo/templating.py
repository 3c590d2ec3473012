"""
Placeholder substitution for SEO templates.

Templates may reference the store name as ``{{storeName}}`` or ``s_n`` and
the current month as ``{{currentDate}}`` or ``c_d``; both forms match
case-insensitively.
"""

import re
from datetime import datetime
from typing import Optional

from app.api.seo import models, schemas
from app.core.utils import current_time, slugify

STORE_NAME_PATTERN = re.compile(r'{{storeName}}|s_n', re.IGNORECASE)
CURRENT_DATE_PATTERN = re.compile(r'{{currentDate}}|c_d', re.IGNORECASE)


def format_current_date(now: Optional[datetime] = None) -> str:
    return (now or current_time()).strftime('%B %Y')


def render_placeholders(
    text: str, store_name: str, now: Optional[datetime] = None
) -> str:
    text = STORE_NAME_PATTERN.sub(lambda _: store_name, text or '')
    return CURRENT_DATE_PATTERN.sub(lambda _: format_current_date(now), text)


def render_store_seo(
    template: Optional[models.SEOTemplate],
    store_name: str,
    now: Optional[datetime] = None,
) -> schemas.RenderedSEO:
    """Render the store SEO fields, falling back to defaults without a template."""
    if not template:
        return schemas.RenderedSEO(
            meta_title=f'{store_name} - Your Store',
            meta_description=f'Buy {store_name} products online',
            focus_keywords=[store_name.lower()],
            slug=slugify(store_name),
        )

    def render(text: str) -> str:
        return render_placeholders(text, store_name, now)

    return schemas.RenderedSEO(
        meta_title=render(template.meta_title),
        meta_description=render(template.meta_description),
        meta_keywords=[render(k) for k in template.meta_keywords],
        focus_keywords=[render(k) for k in template.focus_keywords],
        slug=slugify(render(template.slug or store_name)),
    )
