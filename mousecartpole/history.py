"""Bounded history of state snapshots used to build stacked observations."""
from __future__ import annotations

from collections import deque
from typing import Deque

import torch


class StateHistory:
    """
    FIFO of the most recent state snapshots.

    Snapshots are cloned on the way in, so later in-place edits of the live
    state never leak into past entries. At most ``maxlen`` snapshots are kept;
    pushing onto a full history evicts the oldest one.
    """

    def __init__(self, maxlen: int, state_dim: int):
        if int(maxlen) < 1:
            raise ValueError(f"maxlen must be >= 1, got {maxlen}")
        self.maxlen = int(maxlen)
        self.state_dim = int(state_dim)
        self._entries: Deque[torch.Tensor] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __getitem__(self, idx: int) -> torch.Tensor:
        return self._entries[idx]

    def clear(self) -> None:
        self._entries.clear()

    def push(self, state: torch.Tensor) -> None:
        if tuple(state.shape) != (self.state_dim,):
            raise ValueError(f"Expected state of shape ({self.state_dim},), got {tuple(state.shape)}")
        self._entries.append(state.detach().clone())
        if len(self._entries) > self.maxlen:
            self._entries.popleft()

    def fill(self, state: torch.Tensor) -> None:
        """Replace the contents with ``maxlen`` copies of ``state``."""
        self.clear()
        for _ in range(self.maxlen):
            self.push(state)

    def stacked(self) -> torch.Tensor:
        # oldest first
        return torch.cat(list(self._entries), dim=-1)
