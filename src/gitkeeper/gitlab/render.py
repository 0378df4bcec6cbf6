"""Content renderers used to produce repository file content."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import yaml


@runtime_checkable
class ContentRenderer(Protocol):
    """Anything that can produce file content as bytes.

    ``render`` may raise; callers wrap the failure in a RenderError.
    """

    def render(self) -> bytes: ...


class YamlRenderer:
    """Render one or more YAML documents, e.g. Kubernetes manifests."""

    def __init__(self, *documents: Any, explicit_start: bool = False):
        if not documents:
            raise ValueError("YamlRenderer needs at least one document")
        self.documents = documents
        self.explicit_start = explicit_start

    def render(self) -> bytes:
        if len(self.documents) == 1:
            text = yaml.safe_dump(
                self.documents[0],
                default_flow_style=False,
                sort_keys=False,
                explicit_start=self.explicit_start,
            )
        else:
            # Multiple documents are always separated by "---"
            text = yaml.safe_dump_all(
                self.documents,
                default_flow_style=False,
                sort_keys=False,
                explicit_start=True,
            )
        return text.encode("utf-8")


class TextRenderer:
    """Wrap already-rendered text, such as a file read from disk."""

    def __init__(self, text: str):
        self.text = text

    def render(self) -> bytes:
        return self.text.encode("utf-8")
