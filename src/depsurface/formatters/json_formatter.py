"""JSON formatter for depsurface."""

import json
from typing import List

from ..metrics.models import CodeReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render reports as a JSON array, one object per dependency."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def render(self, reports: List[CodeReport]) -> None:
        print(self.format(reports))

    def format(self, reports: List[CodeReport]) -> str:
        data = [r.to_dict() for r in reports]
        return json.dumps(data, indent=self.indent)
