from __future__ import annotations

from ..core.models import Article


def row_to_article(row) -> Article:
    return Article(
        id=row["id"],
        user_id=row["user_id"],
        url=row["url"],
        title=row.get("title"),
    )
