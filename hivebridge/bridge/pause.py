"""
Pause gate.

A single flag that, when engaged, blocks wrapping, unwrapping, committee
mutation, and balance transfers. It is flipped only by the governed
``pause`` / ``unpause`` operations.
"""

from ..exceptions import EnforcedPause, ExpectedPause


class PauseGate:

    def __init__(self, paused: bool = False):
        self._paused = paused

    @property
    def paused(self) -> bool:
        return self._paused

    def require_not_paused(self) -> None:
        if self._paused:
            raise EnforcedPause("Bridge is paused")

    def require_paused(self) -> None:
        if not self._paused:
            raise ExpectedPause("Bridge is not paused")

    def engage(self) -> None:
        self.require_not_paused()
        self._paused = True

    def release(self) -> None:
        self.require_paused()
        self._paused = False

    def __repr__(self) -> str:
        return f"<PauseGate paused={self._paused}>"
