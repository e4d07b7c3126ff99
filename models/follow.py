"""Follow state machine.

Moves a pair of accounts between not-following, pending-request and
following in response to one actor action, and emits the matching
notification.

A follow edge lives on two documents (the follower's ``following`` and the
followee's ``followers``) and the store has no multi-document transactions.
Every transition therefore writes the follower's ``following`` set first and
the followee's side second. The second write is retried a few times; if it
still fails, PartialWriteError is raised and the two documents disagree until
repair_follow_edges() runs. That pass treats ``following`` as the source of
truth, which is only sound because of the write order above.
"""

import logging
from collections.abc import Callable

from pydantic import BaseModel, Field

from models.account import Account
from models.errors import (
    InvalidOperationError,
    NotFoundError,
    PartialWriteError,
    StorageError,
)
from models.notification import NotificationType
from models.notification_store import NotificationStore
from models.store import DocumentStore

logger = logging.getLogger(__name__)

ACCOUNTS = "accounts"


class FollowStatus(BaseModel):
    """Observable state of an actor -> target relation after a transition.

    Args:
        following: Whether the actor follows the target.
        has_requested: Whether the actor has a pending request to the target.
        followers_count: Target's follower count.
        following_count: Actor's following count.
    """

    following: bool
    has_requested: bool
    followers_count: int
    following_count: int


class RepairReport(BaseModel):
    """Changes made by a follow-edge repair pass.

    Each entry is a (account_id, other_account_id) pair naming the document
    that was changed and the id that was added or removed.
    """

    followers_added: list[tuple[str, str]] = Field(default_factory=list)
    followers_removed: list[tuple[str, str]] = Field(default_factory=list)
    requests_dropped: list[tuple[str, str]] = Field(default_factory=list)
    self_references_removed: list[tuple[str, str]] = Field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return (
            len(self.followers_added)
            + len(self.followers_removed)
            + len(self.requests_dropped)
            + len(self.self_references_removed)
        )


class FollowStateMachine:
    """Follow, unfollow and follow-request transitions.

    Transition table for toggle_follow(actor, target):

    ==============================  ===========  ==================================
    current state                   private?     result
    ==============================  ===========  ==================================
    following                       any          unfollow (also clears any request)
    not following, no request       no           follow + "follow" notification
    not following, no request       yes          request + "follow_request" notif.
    not following, pending request  yes          no-op
    ==============================  ===========  ==================================

    Attributes:
        store: Document store holding the "accounts" collection.
        notifications: Dedup store used for emitted notifications.
        write_attempts: Attempts for the second write of a two-document mutation.
    """

    def __init__(
        self,
        store: DocumentStore,
        notifications: NotificationStore,
        write_attempts: int = 3,
    ) -> None:
        if write_attempts < 1:
            raise ValueError("write_attempts must be at least 1")
        self.store = store
        self.notifications = notifications
        self.write_attempts = write_attempts

    # ===== Transitions =====

    def toggle_follow(self, actor_id: str, target_id: str) -> FollowStatus:
        """Apply one follow action from actor to target.

        Args:
            actor_id: Account performing the action.
            target_id: Account being followed/unfollowed.

        Returns:
            The relation's state after the transition.

        Raises:
            InvalidOperationError: If the actor targets itself.
            NotFoundError: If either account does not exist.
            PartialWriteError: If the followee's side could not be written.
        """
        if actor_id == target_id:
            raise InvalidOperationError("You cannot follow yourself")

        target = self._get_account(target_id)
        actor = self._get_account(actor_id)

        is_following = target_id in actor.following
        has_requested = actor_id in target.follow_requests

        if is_following:
            self.store.remove_from_set(ACCOUNTS, actor_id, "following", target_id)
            self._second_write(
                f"remove {target_id} from {actor_id}.following",
                f"remove {actor_id} from {target_id}.followers",
                lambda: self._drop_follower(target_id, actor_id),
            )
            if has_requested:
                self.notifications.discard(target_id, actor_id, NotificationType.FOLLOW_REQUEST)
            logger.info(f"Account {actor_id} unfollowed {target_id}")

        elif target.is_private:
            if has_requested:
                logger.debug(f"Follow request {actor_id} -> {target_id} already pending")
            elif self.store.add_to_set(ACCOUNTS, target_id, "follow_requests", actor_id):
                logger.info(f"Account {actor_id} requested to follow {target_id}")
                self.notifications.upsert(target_id, actor_id, NotificationType.FOLLOW_REQUEST)

        else:
            self.store.add_to_set(ACCOUNTS, actor_id, "following", target_id)
            self._second_write(
                f"add {target_id} to {actor_id}.following",
                f"add {actor_id} to {target_id}.followers",
                lambda: self._add_follower(target_id, actor_id),
            )
            if has_requested:
                self.notifications.discard(target_id, actor_id, NotificationType.FOLLOW_REQUEST)
            logger.info(f"Account {actor_id} followed {target_id}")
            self.notifications.upsert(target_id, actor_id, NotificationType.FOLLOW)

        return self.status(actor_id, target_id)

    def accept_follow_request(self, target_id: str, requester_id: str) -> FollowStatus:
        """Turn a pending request into a follow edge.

        Args:
            target_id: Private account that received the request.
            requester_id: Account that asked to follow.

        Returns:
            The requester -> target relation after acceptance.

        Raises:
            NotFoundError: If there is no such pending request or account.
            PartialWriteError: If the target's side could not be written.
        """
        target = self._get_account(target_id)
        if requester_id not in target.follow_requests:
            raise NotFoundError("follow request", requester_id)
        self._get_account(requester_id)

        self.store.add_to_set(ACCOUNTS, requester_id, "following", target_id)
        self._second_write(
            f"add {target_id} to {requester_id}.following",
            f"add {requester_id} to {target_id}.followers",
            lambda: self._add_follower(target_id, requester_id),
        )
        logger.info(f"Account {target_id} accepted follow request from {requester_id}")

        self.notifications.upsert(
            requester_id, target_id, NotificationType.FOLLOW_REQUEST_ACCEPTED
        )
        self.notifications.discard(target_id, requester_id, NotificationType.FOLLOW_REQUEST)
        return self.status(requester_id, target_id)

    def decline_follow_request(self, target_id: str, requester_id: str) -> None:
        """Drop a pending request without notifying the requester.

        Raises:
            NotFoundError: If there is no such pending request.
        """
        target = self._get_account(target_id)
        if requester_id not in target.follow_requests:
            raise NotFoundError("follow request", requester_id)

        self.store.remove_from_set(ACCOUNTS, target_id, "follow_requests", requester_id)
        self.notifications.discard(target_id, requester_id, NotificationType.FOLLOW_REQUEST)
        logger.info(f"Account {target_id} declined follow request from {requester_id}")

    def cancel_follow_request(self, actor_id: str, target_id: str) -> FollowStatus:
        """Withdraw the actor's pending request to target.

        Raises:
            NotFoundError: If the actor has no pending request to target.
        """
        target = self._get_account(target_id)
        if actor_id not in target.follow_requests:
            raise NotFoundError("follow request", actor_id)

        self.store.remove_from_set(ACCOUNTS, target_id, "follow_requests", actor_id)
        self.notifications.discard(target_id, actor_id, NotificationType.FOLLOW_REQUEST)
        logger.info(f"Account {actor_id} cancelled follow request to {target_id}")
        return self.status(actor_id, target_id)

    # ===== Queries =====

    def status(self, actor_id: str, target_id: str) -> FollowStatus:
        """Read the actor -> target relation."""
        actor = self._get_account(actor_id)
        target = self._get_account(target_id)
        return FollowStatus(
            following=target_id in actor.following,
            has_requested=actor_id in target.follow_requests,
            followers_count=target.followers_count,
            following_count=actor.following_count,
        )

    # ===== Repair =====

    def repair_follow_edges(self) -> RepairReport:
        """Make both sides of every follow edge agree.

        Each account's ``following`` set is authoritative:
        - a missing ``followers`` entry on the followee is added,
        - a ``followers`` entry without a matching ``following`` is removed,
        - a pending request from an account that already follows is dropped
          along with its notification; on a private account the requester is
          told the request was accepted,
        - an account listed in its own collections is removed from them.

        Returns:
            What was changed.
        """
        report = RepairReport()
        accounts = {a.account_id: a for a in self.store.find(ACCOUNTS)}

        for account_id, account in accounts.items():
            for field_name in ("followers", "following", "follow_requests"):
                if account_id in getattr(account, field_name):
                    self.store.remove_from_set(ACCOUNTS, account_id, field_name, account_id)
                    report.self_references_removed.append((account_id, field_name))

        for account_id, account in accounts.items():
            for followee_id in account.following:
                followee = accounts.get(followee_id)
                if followee is None or followee_id == account_id:
                    continue
                if account_id not in followee.followers:
                    self.store.add_to_set(ACCOUNTS, followee_id, "followers", account_id)
                    report.followers_added.append((followee_id, account_id))

        for account_id, account in accounts.items():
            for follower_id in account.followers:
                follower = accounts.get(follower_id)
                if follower_id == account_id:
                    continue
                if follower is None or account_id not in follower.following:
                    self.store.remove_from_set(ACCOUNTS, account_id, "followers", follower_id)
                    report.followers_removed.append((account_id, follower_id))

            for requester_id in account.follow_requests:
                requester = accounts.get(requester_id)
                if requester is not None and account_id in requester.following:
                    self.store.remove_from_set(
                        ACCOUNTS, account_id, "follow_requests", requester_id
                    )
                    report.requests_dropped.append((account_id, requester_id))
                    self.notifications.discard(
                        account_id, requester_id, NotificationType.FOLLOW_REQUEST
                    )
                    if account.is_private:
                        self.notifications.upsert(
                            requester_id, account_id, NotificationType.FOLLOW_REQUEST_ACCEPTED
                        )

        if report.total_changes:
            logger.warning(f"Follow-edge repair applied {report.total_changes} change(s)")
        else:
            logger.info("Follow-edge repair found nothing to fix")
        return report

    # ===== Internals =====

    def _get_account(self, account_id: str) -> Account:
        return self.store.require(ACCOUNTS, account_id)

    def _add_follower(self, followee_id: str, follower_id: str) -> None:
        self.store.add_to_set(ACCOUNTS, followee_id, "followers", follower_id)
        self.store.remove_from_set(ACCOUNTS, followee_id, "follow_requests", follower_id)

    def _drop_follower(self, followee_id: str, follower_id: str) -> None:
        self.store.remove_from_set(ACCOUNTS, followee_id, "followers", follower_id)
        self.store.remove_from_set(ACCOUNTS, followee_id, "follow_requests", follower_id)

    def _second_write(
        self, first_write: str, second_write: str, write: Callable[[], None]
    ) -> None:
        """Apply the followee-side write, retrying on storage failures.

        Raises:
            PartialWriteError: If every attempt failed.
        """
        last_error: StorageError | None = None
        for attempt in range(1, self.write_attempts + 1):
            try:
                write()
                return
            except StorageError as e:
                last_error = e
                logger.warning(
                    f"Attempt {attempt}/{self.write_attempts} to {second_write} failed: {e}"
                )

        logger.error(
            f"Giving up on '{second_write}' after '{first_write}'; "
            "edge stays asymmetric until repair_follow_edges() runs"
        )
        raise PartialWriteError(first_write, second_write) from last_error
