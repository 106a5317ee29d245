"""
Output of parsed commit history.

See :mod:`gitstat.output.serializer` for the streaming JSON writer.
"""

from .serializer import CommitLogSerializer, SerializerError, write_project  # noqa: F401
