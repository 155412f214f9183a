"""
User: identity, friend edges and the user's own purchase window.

Friend edges are stored as ids and resolved through the UserDirectory, so
Users never hold references to each other.

Out-of-order tolerance:
    Each side remembers the latest befriend and latest unfriend timestamp
    per counterpart. An event only changes the edge if it is not older than
    the latest opposite event. Stale events are ignored and no upstream
    reordering is needed.

Tie-break:
    befriend adds only when last_unfriend < ts, unfriend removes when
    last_befriend <= ts. Both re-read the *other* map at application time,
    so a befriend and an unfriend with the same timestamp always leave the
    edge absent, whichever arrives first.
"""

from typing import Dict, Set

from anomaly_engine.core.purchase_window import PurchaseWindow


class User:

    def __init__(self, user_id: str, window: PurchaseWindow):
        self.id = user_id
        self.friends: Set[str] = set()
        self.last_befriend: Dict[str, str] = {}
        self.last_unfriend: Dict[str, str] = {}
        self.window = window

    def befriend(self, timestamp: str, other_id: str) -> None:
        """
        One side of a befriend event. The caller applies it to both users.
        An unfriend carrying the same timestamp keeps the edge absent.
        """
        previous = self.last_befriend.get(other_id)
        if previous is None or previous < timestamp:
            self.last_befriend[other_id] = timestamp

        unfriended_at = self.last_unfriend.get(other_id)
        if unfriended_at is None or unfriended_at < timestamp:
            self.friends.add(other_id)

    def unfriend(self, timestamp: str, other_id: str) -> None:
        """
        One side of an unfriend event. Mirror image of befriend; on a
        timestamp tie the unfriend wins here too.
        """
        previous = self.last_unfriend.get(other_id)
        if previous is None or previous < timestamp:
            self.last_unfriend[other_id] = timestamp

        befriended_at = self.last_befriend.get(other_id)
        if befriended_at is None or befriended_at <= timestamp:
            self.friends.discard(other_id)

    def is_friend(self, other_id: str) -> bool:
        return other_id in self.friends

    def add_purchase(self, timestamp: str, amount_pennies: int) -> bool:
        return self.window.add(timestamp, amount_pennies)

    # Users are identified by id alone
    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "User") -> bool:
        return self.id < other.id

    def __repr__(self) -> str:
        friends = ",".join(sorted(self.friends))
        return f"User(id={self.id!r}, friends={{{friends}}}, purchases={len(self.window)})"
