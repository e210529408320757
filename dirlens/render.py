"""Listing rendering using Jinja2.

Each File of a listing is rendered with one line template; the File is
available to the template as ``file``, along with any extra context.

Example:
    >>> renderer = ListingRenderer("{{ file.number }} {{ file.name }}")
    >>> print(renderer.render(build_listing("/srv/project")))
    0 docs
    1 src
"""

from typing import Any, Dict, Iterable, Optional

import jinja2

from dirlens.core.constants import DEFAULT_FORMAT, ErrorCode
from dirlens.core.errors import DirlensError
from dirlens.listing.file import File


class RenderError(DirlensError):
    """A listing template could not be compiled or rendered."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_INPUT)


class ListingRenderer:
    """Render Files through a Jinja2 line template."""

    def __init__(
        self,
        template: str = DEFAULT_FORMAT,
        context: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        """Compile the line template.

        Args:
            template: Jinja2 source rendered once per File
            context: Extra variables visible to the template
            **kwargs: Additional Jinja2 environment options

        Raises:
            RenderError: If the template does not compile
        """
        self._context = context or {}
        kwargs.setdefault("undefined", jinja2.StrictUndefined)
        self._env = jinja2.Environment(**kwargs)
        try:
            self._template = self._env.from_string(template)
        except jinja2.TemplateError as e:
            raise RenderError(f"Template error: {e}")

    def render_file(self, file: File) -> str:
        try:
            return self._template.render(self._context, file=file)
        except jinja2.TemplateError as e:
            raise RenderError(f"Template error for {file.path}: {e}")
        except (TypeError, ValueError) as e:
            raise RenderError(f"Cannot render {file.path}: {e}")

    def render(self, files: Iterable[File]) -> str:
        """Render every File, one per line."""
        return "\n".join(self.render_file(f) for f in files)
