"""
View renderer
Substitutes $placeholders in template files from the views directory
"""
from pathlib import Path
from string import Template
from typing import Any, Mapping, Optional, Union


class View:
    """Renders `<views_dir>/<template><extension>` with string.Template"""

    def __init__(self, views_dir: Union[str, Path], extension: str = ".html"):
        self.views_dir = Path(views_dir)
        self.extension = extension

    def _template_path(self, template: str) -> Path:
        path = (self.views_dir / f"{template}{self.extension}").resolve()
        if self.views_dir.resolve() not in path.parents:
            raise ValueError(f"Template '{template}' is outside the views directory")
        return path

    def exists(self, template: str) -> bool:
        try:
            return self._template_path(template).is_file()
        except ValueError:
            return False

    def render(self, template: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a template

        Unknown placeholders are left as-is.

        Raises:
            FileNotFoundError: template file does not exist
        """
        path = self._template_path(template)
        if not path.is_file():
            raise FileNotFoundError(f"View template not found: {path}")
        text = path.read_text(encoding="utf-8")
        return Template(text).safe_substitute(dict(params or {}))
