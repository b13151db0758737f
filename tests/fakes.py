"""Shared test doubles."""


class FakeAdapter:
    """Stands in for LuisAdapter; records every URL it is asked for."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def query(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


LUIS_RESPONSE = {
    "query": "find red shoes now",
    "topScoringIntent": {"intent": "Shopping.FindItem", "score": 0.93},
    "intents": [
        {"intent": "Shopping.FindItem", "score": 0.93},
        {"intent": "None", "score": 0.04},
    ],
    "entities": [
        {"entity": "red shoes", "type": "builtin.keyPhrase", "startIndex": 5, "endIndex": 13},
        {"entity": "now", "type": "builtin.datetimeV2.datetime", "startIndex": 15, "endIndex": 17},
    ],
}
