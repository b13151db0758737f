from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

KEY_PHRASE_TYPE = "builtin.keyPhrase"


class LuisAnalysisError(Exception):
    """Data was requested from an analysis that failed."""


class MissingCapabilityError(Exception):
    """The LUIS app was not set up to return what was asked for."""


@dataclass(slots=True)
class LuisResult:
    """Deserialized LUIS response. Fields beyond the ones read here pass through in raw."""
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def top_intent(self) -> Optional[str]:
        top = self.raw.get("topScoringIntent")
        if isinstance(top, dict) and top.get("intent"):
            return top["intent"]
        # apps queried without verbose=true still list intents
        if self.intents:
            best = max(self.intents, key=lambda i: i.get("score") or 0.0)
            return best.get("intent")
        return None

    @property
    def intents(self) -> List[Dict[str, Any]]:
        return list(self.raw.get("intents") or [])

    @property
    def entities(self) -> Optional[List[Dict[str, Any]]]:
        entities = self.raw.get("entities")
        return None if entities is None else list(entities)

    @property
    def key_phrases(self) -> List[Dict[str, Any]]:
        entities = self.entities
        if entities is None:
            raise MissingCapabilityError(
                "No entities found. Have you enabled Key Phrase entities in Luis.ai under Build > Entities?"
            )
        return [e for e in entities if e.get("type") == KEY_PHRASE_TYPE]


@dataclass(slots=True)
class LuisSuccess:
    result: LuisResult
    ok: bool = field(default=True, init=False)


@dataclass(slots=True)
class LuisFailure:
    message: str
    error: Optional[BaseException] = None
    ok: bool = field(default=False, init=False)

    def descriptor(self) -> Dict[str, Any]:
        return {"status": "error", "message": self.message}


Analysis = Union[LuisSuccess, LuisFailure]
