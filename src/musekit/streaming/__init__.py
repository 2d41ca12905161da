"""Streaming merge logic.

Single-target streams (story writing, persona chat) and the multi-target
comparison hub share the same append-to-tail conversation model.
"""

from .conversation import Conversation, merge_stream, stream_into
from .fanout import TaskOutcome, fan_out
from .hub import MODEL_CONFIGS, ComparisonHub, ModelConfig, error_marker

__all__ = [
    "Conversation",
    "merge_stream",
    "stream_into",
    "TaskOutcome",
    "fan_out",
    "MODEL_CONFIGS",
    "ComparisonHub",
    "ModelConfig",
    "error_marker",
]
