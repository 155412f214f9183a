"""
Network Aggregation: who counts as "the network" and what they bought.

network(user, D):
    every user reachable within D friend hops, excluding the user.
    Breadth-first by hop level with a visited set, so each user is expanded
    at most once even on dense or cyclic graphs.

aggregate_purchases(user):
    one capacity-T window merged from every network member's window,
    i.e. the T most recent purchases made anywhere in the network.

Time Complexity: O(V_D + E_D) for the traversal (users/edges within D hops),
                 O(V_D * T * log T) for the merge
Memory: O(V_D + T)
"""

from typing import List, Optional, Set

from anomaly_engine.core.context import RunContext
from anomaly_engine.core.purchase_window import PurchaseWindow
from anomaly_engine.core.user import User


class NetworkAggregator:

    def __init__(self, context: RunContext):
        self.context = context

    def network(self, user: User, depth: Optional[int] = None) -> Set[User]:
        """
        Users within `depth` hops of `user` (default: the run's D).
        Direct friends are always included, even for depth < 1. The user
        itself is never part of its own network.
        """
        if depth is None:
            depth = self.context.degrees_of_separation

        directory = self.context.directory
        visited = {user.id}
        frontier = [user.id]

        for _ in range(max(depth, 1)):
            next_frontier = []
            for user_id in frontier:
                for friend_id in directory[user_id].friends:
                    if friend_id not in visited:
                        visited.add(friend_id)
                        next_frontier.append(friend_id)
            if not next_frontier:
                break
            frontier = next_frontier

        visited.discard(user.id)
        return {directory[user_id] for user_id in visited}

    def network_members(self, user: User, depth: Optional[int] = None) -> List[User]:
        """network() ordered by id."""
        return sorted(self.network(user, depth))

    def aggregate_purchases(self, user: User) -> PurchaseWindow:
        network_window = self.context.new_window()
        for member in self.network_members(user):
            network_window.merge_from(member.window)
        return network_window
