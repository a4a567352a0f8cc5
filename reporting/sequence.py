import itertools


class RequestSequencer:
    """Hands out increasing tokens; only the latest issued token's response is applied."""

    def __init__(self):
        self._counter = itertools.count(1)
        self.latest = 0

    def issue(self) -> int:
        self.latest = next(self._counter)
        return self.latest

    def is_latest(self, token: int) -> bool:
        return token == self.latest
