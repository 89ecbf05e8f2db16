"""Saturating frequency counters."""

from typing import List, Union

import torch


# Counters are 16-bit; hitting this value means the next increment would wrap.
FREQ_MAX = 0xFFFF


def halve_(counts: Union[torch.Tensor, List[int]]) -> int:
    """
    Halve every counter in place and return the new total.

    Counters may end up at 0, that's fine: they keep their slot and relative
    order, only the scale changes.
    """
    if isinstance(counts, torch.Tensor):
        counts.bitwise_right_shift_(1)
        return int(counts.sum().item())

    total = 0
    for i, c in enumerate(counts):
        counts[i] = c >> 1
        total += counts[i]
    return total
