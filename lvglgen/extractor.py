"""Widget discovery from function naming conventions"""

import logging
import re

from .types import Function, Widget

logger = logging.getLogger(__name__)


class WidgetExtractor:
    """Groups functions into widgets.

    A widget is seeded by a one-argument `<prefix><name>_create` constructor.
    Every method (first parameter is the generic object) whose name continues
    with `<name>_` is attached to that widget, in declaration order.
    """

    def __init__(self, prefix: str = "lv_", object_type: str = "lv_obj_t"):
        self.prefix = prefix
        self.object_type = object_type
        self.create_re = re.compile(rf'^{re.escape(prefix)}([^_]+)_create$')

    def widget_names(self, functions: list[Function]) -> list[str]:
        names = []
        for f in functions:
            m = self.create_re.match(f.name)
            # Multi-argument creators are legacy overloads, not new widgets
            if m and len(f.params) == 1:
                names.append(m.group(1))
        return names

    def widget_token(self, function: Function) -> str:
        """The `<name>` part of `<prefix><name>_...`, empty if there is none"""
        rest = function.name.removeprefix(self.prefix)
        token, sep, _ = rest.partition('_')
        return token if sep else ''

    def extract(self, functions: list[Function]) -> list[Widget]:
        widgets: dict[str, Widget] = {}
        for name in self.widget_names(functions):
            if name in widgets:
                logger.debug("Duplicate constructor for widget %s", name)
                continue
            widgets[name] = Widget(name=name)

        for f in functions:
            if not f.is_method(self.object_type):
                continue
            widget = widgets.get(self.widget_token(f))
            if widget is None:
                logger.debug("No widget for %s", f.name)
                continue
            widget.methods.append(f)

        return list(widgets.values())
