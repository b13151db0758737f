from dataclasses import dataclass, field
from typing import Any, Optional
import uuid

from .config import SETTINGS_NAMESPACE, ENDPOINT_FIELD
from .nlu.types import Analysis

_MISSING = object()


@dataclass(slots=True)
class MailContext:
    """
    Per-request view of an inbound email.

    subject/body may carry HTML. stored_data holds the user's persisted
    settings, skills is the result bag later pipeline stages read from, and
    analysis caches the LUIS outcome for this request only.
    """
    subject: str = ""
    body: str = ""
    stored_data: dict[str, Any] = field(default_factory=dict)
    skills: dict[str, Any] = field(default_factory=dict)
    analysis: Optional[Analysis] = None
    corr_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def get(self, path: str, default: Any = None) -> Any:
        """Dotted-path lookup, e.g. ctx.get("stored_data.natural_language_middleware.luis_endpoint")."""
        head, _, rest = path.partition(".")
        node = getattr(self, head, _MISSING)
        for key in rest.split(".") if rest else []:
            if not isinstance(node, dict):
                return default
            node = node.get(key, _MISSING)
        return default if node is _MISSING else node

    def endpoint_override(self) -> Optional[str]:
        """The endpoint the user saved on the settings page, if any."""
        value = self.get(f"stored_data.{SETTINGS_NAMESPACE}.{ENDPOINT_FIELD}")
        return value or None
