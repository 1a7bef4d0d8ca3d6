INSERT_PENDING_SQL = """
INSERT INTO pending_links (user_id, url, title)
VALUES (%(user_id)s, %(url)s, %(title)s)
RETURNING id
"""

GET_PENDING_BY_ID_SQL = "SELECT id, user_id, url, title FROM pending_links WHERE id = %s"

LIST_PENDING_FOR_USER_SQL = """
SELECT id, user_id, url, title
FROM pending_links
WHERE user_id = %s
ORDER BY id
"""

LIST_ARCHIVED_FOR_USER_SQL = """
SELECT id, user_id, url, title
FROM archived_links
WHERE user_id = %s
ORDER BY id
"""

ARCHIVE_PENDING_SQL = """
INSERT INTO archived_links (user_id, url, title)
SELECT user_id, url, title
FROM pending_links
WHERE id = %(id)s AND user_id = %(user_id)s
RETURNING id
"""

DELETE_PENDING_SQL = "DELETE FROM pending_links WHERE id = %s AND user_id = %s"

DELETE_ARCHIVED_SQL = "DELETE FROM archived_links WHERE id = %s AND user_id = %s"
