"""Merge per-channel window captions into one structural table.

Rows are keyed by ``window_index``.  The first channel that reports an index
seeds the row's bounds; every later channel widens them to the minimum start
and maximum end.  A merged span can therefore be wider than the span of any
single channel.  Channels without a caption for an index leave its label
unset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from ..types import StructuralRow, TrendLabel, WindowCaption


@dataclass
class _RowBuilder:
    window_index: int
    start_time: float
    end_time: float
    labels: Dict[str, TrendLabel] = field(default_factory=dict)

    def add(self, channel: str, caption: WindowCaption) -> None:
        self.start_time = min(self.start_time, caption.start_time)
        self.end_time = max(self.end_time, caption.end_time)
        self.labels[channel] = caption.label

    def finalize(self) -> StructuralRow:
        return StructuralRow(self.window_index, self.start_time, self.end_time, dict(self.labels))


def merge_captions(captions: Mapping[str, Sequence[WindowCaption]]) -> List[StructuralRow]:
    """Return one :class:`StructuralRow` per window index, sorted by index."""

    builders: Dict[int, _RowBuilder] = {}
    for channel, channel_captions in captions.items():
        for caption in channel_captions:
            builder = builders.get(caption.window_index)
            if builder is None:
                builder = _RowBuilder(caption.window_index, caption.start_time, caption.end_time)
                builders[caption.window_index] = builder
            builder.add(channel, caption)
    return [builders[index].finalize() for index in sorted(builders)]


__all__ = ["merge_captions"]
