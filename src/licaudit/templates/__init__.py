"""licaudit template rendering.

Jinja2-based rendering of the third-party notice document. Output is
deterministic: identical records always render identically.
"""

from licaudit.templates.renderer import NoticeRenderer

__all__ = ["NoticeRenderer"]
