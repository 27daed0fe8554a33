"""Random default names for new sessions.

Names look like ``swift-otter-042``.
"""

import random
import threading

ADJECTIVES = (
    "bold",
    "bright",
    "calm",
    "clever",
    "daring",
    "eager",
    "gentle",
    "lively",
    "nimble",
    "radiant",
    "steady",
    "swift",
    "vivid",
)

NOUNS = (
    "albatross",
    "badger",
    "copper",
    "dolphin",
    "falcon",
    "juniper",
    "lynx",
    "maple",
    "otter",
    "pine",
    "raven",
    "spruce",
    "swift",
    "walnut",
)

FALLBACK_LABEL = "session"


class LabelGenerator:
    """Generates ``adjective-noun-NNN`` labels from its own random source.

    The random source is guarded by a lock so one generator can be shared
    between threads.
    """

    def __init__(
        self,
        adjectives: tuple[str, ...] = ADJECTIVES,
        nouns: tuple[str, ...] = NOUNS,
        rng: random.Random | None = None,
    ):
        self.adjectives = tuple(adjectives)
        self.nouns = tuple(nouns)
        self._rng = rng or random.Random()
        self._lock = threading.Lock()

    def generate(self) -> str:
        """Return a new label, or FALLBACK_LABEL if a word list is empty."""
        with self._lock:
            if not self.adjectives or not self.nouns:
                return FALLBACK_LABEL
            adjective = self._rng.choice(self.adjectives)
            noun = self._rng.choice(self.nouns)
            number = self._rng.randrange(1000)
        return f"{adjective}-{noun}-{number:03d}"
