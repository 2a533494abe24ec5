"""Placeholder substitution and template file rendering.

Templates are plain text files containing ``{Key}`` markers.  A marker is
replaced only when its key is present in the mapping; every other marker (and
every other brace in the C# source) is left exactly as written.

Known limitation: keys are substituted one full pass at a time in mapping
order, so a replacement value that itself contains a ``{Key}`` marker for a
later key will be substituted again.  Callers must not put marker-shaped text
inside replacement values.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path

from archgen.config import DEFAULT_TEMPLATES_DIR
from archgen.utils import read_text, write_text

TEMPLATE_SUFFIX = ".template"

MARKER_RE = re.compile(r"\{([A-Z][A-Za-z]*)\}")


def substitute(text: str, mapping: Mapping[str, str]) -> str:
    """Replace every ``{Key}`` marker whose key is in *mapping*.

    Unknown markers are preserved verbatim; this function never raises.
    """
    for key, value in mapping.items():
        text = text.replace("{" + key + "}", value)
    return text


def find_markers(text: str) -> set[str]:
    """Return the set of marker keys referenced by *text*."""
    return set(MARKER_RE.findall(text))


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Reads ``.template`` files from a template root and renders them.

    The root is organised by pattern directory (``cqrs/``, ``minimal_api/``,
    ...).  The renderer never writes below the template root.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = DEFAULT_TEMPLATES_DIR
        self.template_dir = Path(template_dir)

    # -- Lookup ------------------------------------------------------------

    def pattern_dir(self, subdir: str) -> Path:
        """Return the template subtree for one pattern directory."""
        return self.template_dir / subdir

    def template_path(self, subdir: str, template: str) -> Path:
        """Return the on-disk path of *template* inside *subdir*."""
        return self.pattern_dir(subdir) / template

    # -- Rendering ---------------------------------------------------------

    async def render(self, template_path: str | Path, mapping: Mapping[str, str]) -> str:
        """Read *template_path* and return its substituted content."""
        raw = await read_text(template_path)
        return substitute(raw, mapping)

    async def render_to_file(
        self,
        template_path: str | Path,
        output_path: str | Path,
        mapping: Mapping[str, str],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically and an existing file is
        overwritten.  Returns the output path.
        """
        content = await self.render(template_path, mapping)
        return await write_text(output_path, content)

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of template paths under *prefix*.

        Paths are relative to the template root directory and use forward
        slashes.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob(f"*{TEMPLATE_SUFFIX}")
        )
