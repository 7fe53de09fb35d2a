"""
T-SQL text used against the publisher database.

All statements take `?` parameter markers; values are never interpolated.
"""

from __future__ import annotations

from src.enums import ArticleVariant

SQL_SYSTEM_TABLE_EXISTS = "SELECT OBJECT_ID(?, N'U');"

SQL_SELECT_TRANSACTIONAL_PUBLICATION = """
SELECT p.name, p.repl_freq
FROM dbo.syspublications AS p
WHERE p.name = ?;
"""

SQL_SELECT_MERGE_PUBLICATION = """
SELECT p.name
FROM dbo.sysmergepublications AS p
WHERE p.name = ?;
"""

_SQL_COUNT_ARTICLE: dict[ArticleVariant, str] = {
    ArticleVariant.LOG_BASED: """
SELECT COUNT(*)
FROM dbo.sysarticles AS a
JOIN dbo.syspublications AS p ON p.pubid = a.pubid
WHERE p.name = ? AND a.name = ?;
""",
    ArticleVariant.TABLE_BASED: """
SELECT COUNT(*)
FROM dbo.sysmergearticles AS a
JOIN dbo.sysmergepublications AS p ON p.pubid = a.pubid
WHERE p.name = ? AND a.name = ?;
""",
}

_SQL_SELECT_ARTICLE: dict[ArticleVariant, str] = {
    ArticleVariant.LOG_BASED: """
SELECT a.name,
       OBJECT_SCHEMA_NAME(a.objid),
       OBJECT_NAME(a.objid),
       CAST(a.filter_clause AS nvarchar(max)),
       a.schema_option
FROM dbo.sysarticles AS a
JOIN dbo.syspublications AS p ON p.pubid = a.pubid
WHERE p.name = ? AND a.name = ?;
""",
    ArticleVariant.TABLE_BASED: """
SELECT a.name,
       OBJECT_SCHEMA_NAME(a.objid),
       OBJECT_NAME(a.objid),
       a.subset_filterclause,
       a.schema_option
FROM dbo.sysmergearticles AS a
JOIN dbo.sysmergepublications AS p ON p.pubid = a.pubid
WHERE p.name = ? AND a.name = ?;
""",
}

SQL_ADD_ARTICLE = """
EXEC sp_addarticle
    @publication = ?,
    @article = ?,
    @source_owner = ?,
    @source_object = ?,
    @filter_clause = ?,
    @schema_option = ?;
"""

SQL_ADD_MERGE_ARTICLE = """
EXEC sp_addmergearticle
    @publication = ?,
    @article = ?,
    @source_owner = ?,
    @source_object = ?,
    @subset_filterclause = ?,
    @schema_option = ?;
"""

SQL_ARTICLE_FILTER = """
EXEC sp_articlefilter
    @publication = ?,
    @article = ?,
    @filter_name = ?,
    @filter_clause = ?;
"""

SQL_ARTICLE_VIEW = """
EXEC sp_articleview
    @publication = ?,
    @article = ?,
    @view_name = ?,
    @filter_clause = ?;
"""

SQL_REFRESH_SUBSCRIPTIONS = "EXEC sp_refreshsubscriptions @publication = ?;"

SQL_DROP_ARTICLE = """
EXEC sp_droparticle
    @publication = ?,
    @article = ?,
    @force_invalidate_snapshot = 1;
"""


def sql_count_article(variant: ArticleVariant) -> str:
    """Count articles with a given name in a given publication."""
    return _SQL_COUNT_ARTICLE[variant]


def sql_select_article(variant: ArticleVariant) -> str:
    """Read back name, source schema/object, filter and schema option of one article."""
    return _SQL_SELECT_ARTICLE[variant]
