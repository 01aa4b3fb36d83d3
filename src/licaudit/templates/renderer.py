"""Third-party notice renderer.

Renders package records to a plain-text NOTICE document using the
package's Jinja2 templates.
"""

import logging
from collections.abc import Sequence
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from licaudit.models import PackageRecord

logger = logging.getLogger(__name__)

NOTICE_TEMPLATE = "NOTICE.txt.j2"


def underline(text: str, char: str = "=") -> str:
    """Return a rule as wide as ``text``."""
    return char * len(text)


class NoticeRenderer:
    """Renders package records to a third-party notice document.

    Usage:
        renderer = NoticeRenderer()
        text = renderer.render(records)
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("licaudit", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["underline"] = underline

    def render(
        self,
        records: Sequence[PackageRecord],
        template_name: str = NOTICE_TEMPLATE,
    ) -> str:
        """Render records with ``template_name``.

        Raises:
            ValueError: If the template is missing or rendering fails
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateError as e:
            raise ValueError(f"Template not found: {template_name}") from e

        try:
            rendered = template.render(**self._build_context(records))
        except TemplateError as e:
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.debug("Rendered notice (%d characters)", len(rendered))
        return rendered

    def _build_context(self, records: Sequence[PackageRecord]) -> dict[str, Any]:
        return {
            "packages": [
                {
                    "path": record.path,
                    "repository": record.repository,
                    "revision": record.revision,
                    "url": record.url,
                    "licenses": [
                        {"type": lic.type, "file": lic.file, "text": lic.text.rstrip("\n")}
                        for lic in record.licenses
                    ],
                }
                for record in records
            ],
        }
