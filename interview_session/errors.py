from __future__ import annotations  # Domain errors raised by session and report operations


class PreconditionError(RuntimeError):  # Required input state is missing for the call
    pass


class InvalidTransitionError(PreconditionError):  # Status change not allowed from the current state
    def __init__(self, entity: str, record_id: str, current: str, target: str) -> None:
        super().__init__(f"{entity} {record_id} cannot move from '{current}' to '{target}'")
        self.entity = entity
        self.record_id = record_id
        self.current = current
        self.target = target


__all__ = ["InvalidTransitionError", "PreconditionError"]
