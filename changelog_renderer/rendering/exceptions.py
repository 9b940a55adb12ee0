"""Custom exceptions for the rendering module."""


class TemplateSyntaxError(Exception):
    """Raised when a changelog template cannot be compiled."""

    def __init__(self, template_name: str, lineno: int | None, fragment: str, reason: str) -> None:
        """Initializes the exception with the offending template fragment."""
        location = f"line {lineno}" if lineno is not None else "unknown line"
        super().__init__(f"Syntax error in {template_name} template at {location}: {reason} (near {fragment!r})")
        self.template_name = template_name
        self.lineno = lineno
        self.fragment = fragment
        self.reason = reason


class TemplateRenderError(Exception):
    """Raised when a compiled changelog template fails to render."""

    def __init__(self, template_name: str, reason: str) -> None:
        """Initializes the exception with the failing template name."""
        super().__init__(f"Failed to render {template_name} template: {reason}")
        self.template_name = template_name
        self.reason = reason
