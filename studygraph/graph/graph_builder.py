"""
Builds a SocialGraph from accepted-connection records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..models import ConnectionPair
from .social_graph import SocialGraph

logger = logging.getLogger(__name__)


def build_social_graph(
    connections: Iterable[ConnectionPair | Mapping[str, Any]],
    users: Iterable[str] | None = None,
    thread_safe: bool = False,
) -> SocialGraph:
    """Fold accepted connection pairs into a populated graph.

    Args:
        connections: ConnectionPair records, or mappings using either
            source_user_id/target_user_id or sourceUserId/targetUserId keys
        users: Extra user ids to register even if they have no connections
        thread_safe: Passed through to SocialGraph

    Returns:
        The populated SocialGraph
    """
    graph = SocialGraph(thread_safe=thread_safe)

    for user_id in users or ():
        graph.add_user(user_id)

    added = 0
    skipped = 0
    for record in connections:
        pair = record if isinstance(record, ConnectionPair) else ConnectionPair.model_validate(record)
        if pair.is_self_loop:
            logger.warning(f"Skipping self-referential connection for user {pair.source_user_id}")
            graph.add_user(pair.source_user_id)
            skipped += 1
            continue
        graph.add_connection(pair.source_user_id, pair.target_user_id)
        added += 1

    stats = graph.get_stats()
    logger.info(
        f"Graph built with {stats.total_users} users and {stats.total_connections} connections "
        f"({added} records applied, {skipped} self-referential skipped)"
    )
    return graph
