"""Shared type aliases for mslnk modules."""

import os
from datetime import datetime

TargetPath = str | os.PathLike[str]
Timestamp = int | datetime | None
