import json
from typing import Any

import yaml

from binstream.core.ports.render import Renderer


class JsonRenderer(Renderer):
    def render(self, data: dict[str, Any]) -> str:
        return json.dumps(self._normalize(data), indent=2, sort_keys=False)

    def _normalize(self, obj: Any) -> Any:
        if isinstance(obj, bytes):
            return obj.hex()

        if isinstance(obj, dict):
            return {str(k): self._normalize(v) for k, v in obj.items()}

        if isinstance(obj, (list, tuple)):
            return [self._normalize(x) for x in obj]

        return obj


class YamlRenderer(JsonRenderer):
    def render(self, data: dict[str, Any]) -> str:
        return yaml.safe_dump(self._normalize(data), sort_keys=False)


def get_renderer(fmt: str) -> Renderer | None:
    match fmt:
        case "json":
            return JsonRenderer()
        case "yaml":
            return YamlRenderer()
        case _:
            return None
