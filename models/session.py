from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionState:
    """Mutable state of one listening session.

    The user toggle survives context changes. The skip counter resets per
    context. Guard, marker and mute fields only live for one pending
    operation.

    Attributes:
        active: User toggle, interception is bypassed while False
        skip_counter: Forward skips counted for the native pass-through cadence
        handling: Re-entrancy guard, held while a skip/back request runs
        guard_token: Identifies the current guard holder
        played_by_us_uri: Uri of the track this session just asked to play
        native_pending: A native pass-through skip awaits validation
        pass_through_id: Identifies the current pass-through for its deferred skip
        native_retries: Native picks rejected in the current pass-through
        muted: Output was muted for a transition
        saved_volume: Volume to restore once the transition resolves
        progress: Last sampled playback position in seconds
        duration: Last sampled track duration in seconds
        last_context_uri: Context observed by the last track change
    """
    active: bool = True
    skip_counter: int = 0
    handling: bool = False
    guard_token: int = 0
    played_by_us_uri: str | None = None
    native_pending: bool = False
    pass_through_id: int = 0
    native_retries: int = 0
    muted: bool = False
    saved_volume: float | None = None
    progress: float = 0.0
    duration: float = 0.0
    last_context_uri: str | None = None

    def acquire_guard(self) -> int | None:
        """Take the re-entrancy guard.

        Returns:
            Token to release the guard with, or None if it is already held.
        """
        if self.handling:
            return None
        self.handling = True
        self.guard_token += 1
        return self.guard_token

    def release_guard(self, token: int) -> bool:
        """Release the guard if it is still held under token."""
        if not self.handling or token != self.guard_token:
            return False
        self.handling = False
        return True

    def begin_pass_through(self) -> int:
        """Mark a native pass-through as pending.

        Returns:
            Id the deferred native skip must still match when it fires.
        """
        self.native_pending = True
        self.pass_through_id += 1
        return self.pass_through_id

    def is_current_pass_through(self, pass_through_id: int) -> bool:
        return self.native_pending and pass_through_id == self.pass_through_id

    def cancel_pass_through(self) -> None:
        """Drop a pending pass-through so its deferred skip becomes a no-op."""
        self.native_pending = False
        self.pass_through_id += 1

    def reset_context(self, context_uri: str | None) -> None:
        """Reset per-context fields, keeping the user toggle."""
        self.last_context_uri = context_uri
        self.skip_counter = 0
        self.handling = False
        self.played_by_us_uri = None
        self.cancel_pass_through()
        self.native_retries = 0
