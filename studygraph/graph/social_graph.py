"""
Undirected social graph of accepted connections using NetworkX.

Every query is total: unknown ids degrade to an empty, zero or -1 result
instead of raising, so recommendation code can compose graph lookups
without existence checks.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, nullcontext

import networkx as nx

from ..models import FriendOfFriend, GraphStats

logger = logging.getLogger(__name__)


class SocialGraph:
    """Simple undirected graph of user ids backed by ``nx.Graph``.

    Neighbor iteration follows insertion order, which makes every ranking
    that falls back to encounter order reproducible.

    Mutations touch two adjacency entries. Pass ``thread_safe=True`` when one
    instance is shared between threads; otherwise callers must serialize
    writers themselves.
    """

    def __init__(self, thread_safe: bool = False):
        self.graph = nx.Graph()
        self._lock: threading.RLock | None = threading.RLock() if thread_safe else None

    def _guard(self) -> AbstractContextManager[object]:
        return self._lock if self._lock is not None else nullcontext()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_user(self, user_id: str) -> None:
        """Ensure the user exists as a node. No-op if already present."""
        with self._guard():
            if user_id not in self.graph:
                self.graph.add_node(user_id)

    def add_connection(self, user_a: str, user_b: str) -> None:
        """Connect two users. Re-adding an existing edge changes nothing.

        Self-loops are never stored: the user is registered but the edge is
        skipped.
        """
        with self._guard():
            if user_a == user_b:
                logger.warning(f"Ignoring self-connection for user {user_a}")
                self.add_user(user_a)
                return
            self.graph.add_edge(user_a, user_b)
            logger.debug(f"Connected {user_a} <-> {user_b}")

    def remove_connection(self, user_a: str, user_b: str) -> None:
        """Disconnect two users. Silent no-op when the edge does not exist."""
        with self._guard():
            if self.graph.has_edge(user_a, user_b):
                self.graph.remove_edge(user_a, user_b)
                logger.debug(f"Disconnected {user_a} <-> {user_b}")

    def remove_user(self, user_id: str) -> None:
        """Drop a user and every incident connection. No-op for unknown ids."""
        with self._guard():
            if user_id in self.graph:
                self.graph.remove_node(user_id)
                logger.debug(f"Removed user {user_id}")

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def has_user(self, user_id: str) -> bool:
        with self._guard():
            return user_id in self.graph

    def users(self) -> list[str]:
        """All user ids in insertion order."""
        with self._guard():
            return list(self.graph.nodes)

    def __contains__(self, user_id: object) -> bool:
        with self._guard():
            return user_id in self.graph

    def __len__(self) -> int:
        with self._guard():
            return self.graph.number_of_nodes()

    def __iter__(self) -> Iterator[str]:
        return iter(self.users())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_connections(self, user_id: str) -> set[str]:
        """Direct neighbors; empty for unknown or isolated users."""
        with self._guard():
            if user_id not in self.graph:
                return set()
            return set(self.graph.adj[user_id])

    def get_mutual_connections(self, user_a: str, user_b: str) -> set[str]:
        """Users directly connected to both ``user_a`` and ``user_b``."""
        with self._guard():
            if user_a not in self.graph or user_b not in self.graph:
                return set()
            return set(self.graph.adj[user_a]) & set(self.graph.adj[user_b])

    def shortest_path(self, start: str, end: str) -> int:
        """Number of edges on the shortest path, 0 for the same user, -1 if unreachable."""
        with self._guard():
            if start == end:
                return 0
            if start not in self.graph or end not in self.graph:
                return -1
            try:
                return int(nx.shortest_path_length(self.graph, start, end))
            except nx.NetworkXNoPath:
                return -1

    def get_users_within_degrees(self, user_id: str, max_degrees: int) -> dict[str, int]:
        """Every user reachable within ``max_degrees`` hops, mapped to its hop count.

        The origin itself is not included.
        """
        with self._guard():
            if user_id not in self.graph or max_degrees <= 0:
                return {}
            lengths = nx.single_source_shortest_path_length(self.graph, user_id, cutoff=max_degrees)
            return {other: degree for other, degree in lengths.items() if degree > 0}

    def get_friend_of_friends(self, user_id: str, limit: int = 10) -> list[FriendOfFriend]:
        """Users exactly two hops away, ranked by number of mutual connections.

        Direct connections and the user itself are excluded. Equal counts keep
        the order in which candidates were first reached.
        """
        with self._guard():
            if user_id not in self.graph or limit <= 0:
                return []

            direct = self.graph.adj[user_id]
            mutual_counts: dict[str, int] = {}
            for friend in direct:
                for candidate in self.graph.adj[friend]:
                    if candidate == user_id or candidate in direct:
                        continue
                    mutual_counts[candidate] = mutual_counts.get(candidate, 0) + 1

        ranked = sorted(mutual_counts.items(), key=lambda item: item[1], reverse=True)
        return [FriendOfFriend(user_id=candidate, mutual_count=count) for candidate, count in ranked[:limit]]

    def get_centrality(self, user_id: str) -> int:
        """Degree centrality: number of direct connections, 0 for unknown users."""
        with self._guard():
            if user_id not in self.graph:
                return 0
            return int(self.graph.degree[user_id])

    def find_communities(self) -> list[list[str]]:
        """Connected components, largest first.

        Members are listed in insertion order and equal-sized components keep
        discovery order.
        """
        with self._guard():
            order = {node: index for index, node in enumerate(self.graph.nodes)}
            communities = [
                sorted(component, key=order.__getitem__) for component in nx.connected_components(self.graph)
            ]
        communities.sort(key=len, reverse=True)
        logger.debug(f"Found {len(communities)} communities across {len(order)} users")
        return communities

    def get_ego_network(self, user_id: str, radius: int = 1) -> SocialGraph:
        """Subgraph of everyone within ``radius`` hops, origin included.

        The copy is locked whenever this graph is.
        """
        ego = SocialGraph(thread_safe=self._lock is not None)
        with self._guard():
            if user_id not in self.graph:
                return ego
            ego.graph = nx.Graph(nx.ego_graph(self.graph, user_id, radius=max(radius, 0)))
        return ego

    def get_stats(self) -> GraphStats:
        with self._guard():
            total_users = self.graph.number_of_nodes()
            degrees = [degree for _, degree in self.graph.degree]
            total_connections = self.graph.number_of_edges()

        if total_users == 0:
            return GraphStats(
                total_users=0,
                total_connections=0,
                avg_connections_per_user=0.0,
                max_connections=0,
                min_connections=0,
            )

        return GraphStats(
            total_users=total_users,
            total_connections=total_connections,
            avg_connections_per_user=round(sum(degrees) / total_users, 2),
            max_connections=max(degrees),
            min_connections=min(degrees),
        )
