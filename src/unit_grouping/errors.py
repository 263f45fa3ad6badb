from __future__ import annotations


class GroupingConfigError(ValueError):
    pass
