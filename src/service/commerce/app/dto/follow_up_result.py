import attrs


@attrs.define(frozen=True)
class FollowUpRunResult:
    done: int = 0
    failed: int = 0
    skipped: int = 0  # finished or locked by another processor meanwhile
