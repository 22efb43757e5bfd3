"""A naive register allocator that spills the earliest-loaded value when full."""

from __future__ import annotations

from typing import Optional, Protocol

from minicc.platform import MAX_USABLE_REG_NUM


class RegisterAllocationError(RuntimeError):
    """Raised when no register can be freed for a new allocation."""


class LoadableValue(Protocol):
    """A value that can be held in a load register."""

    load_reg_id: Optional[int]


class SimpleRegisterAllocator:
    """Hands out registers x0-x30, spilling the oldest holder when none is free."""

    def __init__(self) -> None:
        self._occupied: set[int] = set()
        self._used: set[int] = set()
        self._holders: list[LoadableValue] = []

    @staticmethod
    def _check(no: int) -> None:
        if not 0 <= no < MAX_USABLE_REG_NUM:
            raise ValueError(f"register number out of range: {no}")

    def _mark(self, no: int) -> None:
        self._occupied.add(no)
        self._used.add(no)

    def allocate(self, var: Optional[LoadableValue] = None, no: Optional[int] = None) -> int:
        """Give ``var`` a register, preferring ``no`` when it is free, and return its number."""
        if var is not None and var.load_reg_id is not None:
            return var.load_reg_id

        regno: Optional[int] = None
        if no is not None:
            self._check(no)
            if no not in self._occupied:
                regno = no
        if regno is None:
            regno = next(
                (k for k in range(MAX_USABLE_REG_NUM) if k not in self._occupied), None
            )

        if regno is not None:
            self._mark(regno)
        else:
            if not self._holders:
                raise RegisterAllocationError("no free register and nothing to spill")
            oldest = self._holders.pop(0)
            regno = oldest.load_reg_id
            oldest.load_reg_id = None
            if regno is None:
                raise RegisterAllocationError("spilled value held no register")

        if var is not None:
            var.load_reg_id = regno
            self._holders.append(var)
        return regno

    def allocate_register(self, no: int) -> None:
        """Take register ``no``, evicting whatever value holds it."""
        self._check(no)
        if no in self._occupied:
            self.free_register(no)
        self._mark(no)

    def free(self, var: Optional[LoadableValue]) -> None:
        """Release the load register held by ``var``, if any."""
        if var is None or var.load_reg_id is None:
            return
        self._occupied.discard(var.load_reg_id)
        for index, holder in enumerate(self._holders):
            if holder is var:
                del self._holders[index]
                break
        var.load_reg_id = None

    def free_register(self, no: Optional[int]) -> None:
        """Release register ``no`` and detach the value holding it."""
        if no is None or no == -1:
            return
        self._check(no)
        self._occupied.discard(no)
        for index, holder in enumerate(self._holders):
            if holder.load_reg_id == no:
                holder.load_reg_id = None
                del self._holders[index]
                break

    def is_occupied(self, no: int) -> bool:
        """Tell whether register ``no`` is currently taken."""
        self._check(no)
        return no in self._occupied

    def was_used(self, no: int) -> bool:
        """Tell whether register ``no`` has ever been handed out."""
        self._check(no)
        return no in self._used