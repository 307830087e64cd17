"""Exceptions raised by the edition pipeline."""


class UpstreamServiceError(RuntimeError):
    """The text-generation service failed or did not answer."""


class SectionNotFound(LookupError):
    """Requested section name is unknown or its index is out of range."""

    def __init__(self, name: str):
        super().__init__(f"Section not found: {name}")
        self.name = name
