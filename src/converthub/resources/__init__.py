"""
Resource facades, one per API surface.
"""

from .conversions import ConversionsResource
from .formats import FormatsResource
from .jobs import JobsResource
from .uploads import ChunkedUploadResource

__all__ = [
    "ConversionsResource",
    "FormatsResource",
    "JobsResource",
    "ChunkedUploadResource",
]
