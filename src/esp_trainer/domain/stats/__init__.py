# Domain Stats Package
from .models import (
    CardAccuracy,
    DeckStats,
    HeatMapData,
    NumberAccuracy,
    ProgressDataPoint,
    SuitAccuracy,
    TimeSlot,
)

__all__ = [
    "DeckStats",
    "HeatMapData",
    "TimeSlot",
    "CardAccuracy",
    "SuitAccuracy",
    "NumberAccuracy",
    "ProgressDataPoint",
]
