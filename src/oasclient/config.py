from __future__ import annotations

import enum
from dataclasses import dataclass


class ResourceGrouping(enum.Enum):
    """How paths are batched into one generated client class."""

    # Every non-templated segment: /orders/{id}/items -> OrdersItems
    PATH = "path"
    # Only the first segment: /orders/{id}/items -> Orders
    LEADING_SEGMENT = "leading-segment"


@dataclass(frozen=True)
class CompilerOptions:
    """Settings threaded through type resolution and operation compilation.

    Attributes:
        default_media_type: Codec used for request bodies and Accept headers
            when the document declares none.
        resource_grouping: Naming convention used to group operations into clients.
    """

    default_media_type: str = "application/json"
    resource_grouping: ResourceGrouping = ResourceGrouping.PATH
