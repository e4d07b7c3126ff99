"""Visibility gate for private accounts."""

from models.account import Account
from models.errors import PrivateProfileError


class VisibilityGate:
    """Decides whether a viewer may see an account's posts, stories and details.

    A public account is visible to everyone. A private account is visible to
    itself and to its followers only; a pending follow request does not
    grant access.
    """

    def can_view(self, viewer_id: str, subject: Account) -> bool:
        """Return whether viewer_id may see subject's content."""
        return (
            not subject.is_private
            or viewer_id == subject.account_id
            or viewer_id in subject.followers
        )

    def ensure_can_view(self, viewer_id: str, subject: Account) -> None:
        """Raise unless viewer_id may see subject's content.

        Raises:
            PrivateProfileError: Carrying the subject's public summary and the
                viewer's request state, so a placeholder can be rendered.
        """
        if self.can_view(viewer_id, subject):
            return
        summary = subject.summary()
        summary["has_requested"] = viewer_id in subject.follow_requests
        raise PrivateProfileError(summary)
