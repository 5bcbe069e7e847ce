"""Page context builder.

Loads the shared ``global`` template and one page template from a context
directory, resolves both concurrently and returns the render context::

    context/
      global.json            resolved into ctx["global"] (optional)
      pages/
        home.json            resolved into ctx["page"]

Templates may be JSON or YAML (``.json``, ``.yaml``, ``.yml``) and are read
on every call.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from contextspine.core.errors import TemplateError, TemplateNotFoundError
from contextspine.core.logging import LogContext, get_logger
from contextspine.framework.resolver import ContextResolver
from contextspine.framework.sources.files import find_document, read_document

logger = get_logger(__name__)

GLOBAL_TEMPLATE = "global"
PAGES_DIR = "pages"

_PAGE_NAME = re.compile(r"^[\w-]+(/[\w-]+)*$")


class PageContextBuilder:
    """Builds ``{STATIC, BASE, PHP, query, global, page}`` for a page."""

    def __init__(self, resolver: ContextResolver, context_dir: str | Path):
        self.resolver = resolver
        self.context_dir = Path(context_dir)

    def load_template(self, page: str) -> Any:
        """Read ``pages/<page>.{json,yaml,yml}``.

        Raises:
            TemplateNotFoundError: no such page template.
            TemplateError: the page name or file is invalid.
        """
        if not _PAGE_NAME.match(page):
            raise TemplateError(f"Invalid page name: {page!r}")
        pages_dir = self.context_dir / PAGES_DIR
        path = find_document(pages_dir, page)
        if path is None:
            raise TemplateNotFoundError(page, search_dir=str(pages_dir))
        return read_document(path, error_type=TemplateError)

    def load_global(self) -> Any:
        """Read ``global.{json,yaml,yml}``; an absent file is an empty tree."""
        path = find_document(self.context_dir, GLOBAL_TEMPLATE)
        if path is None:
            return {}
        document = read_document(path, error_type=TemplateError)
        return {} if document is None else document

    async def prepare(
        self,
        page: str,
        *,
        static_url: str = "",
        base_url: str = "",
        php_url: str = "",
        query: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Load and resolve the global and page templates.

        ``query`` is the request's query parameters; it is exposed to the
        renderer as ``query`` and passed to every directive as caller params.
        """
        page_tree = self.load_template(page)
        global_tree = self.load_global()
        # both trees are checked before either starts dispatching
        self.resolver.validate(global_tree)
        self.resolver.validate(page_tree)

        async with LogContext(page=page):
            logger.info("context.prepare", context_dir=str(self.context_dir))
            resolved_global, resolved_page = await asyncio.gather(
                self.resolver.resolve(global_tree, query),
                self.resolver.resolve(page_tree, query),
            )
            logger.info("context.ready")

        return {
            "STATIC": static_url,
            "BASE": base_url,
            "PHP": php_url,
            "query": query,
            "global": resolved_global,
            "page": resolved_page,
        }


__all__ = ["PageContextBuilder"]
