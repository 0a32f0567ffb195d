"""User-type classification for company groups."""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Sequence

from .records import UserRecord

CLIENT_USERS = "Client Users"
FIRM_USERS = "Firm Users"
USER_TYPES = [CLIENT_USERS, FIRM_USERS]


def tag_record(record: UserRecord) -> str:
    """Client Users when the company name says so, Firm Users otherwise."""
    return CLIENT_USERS if record.company_name == CLIENT_USERS else FIRM_USERS


class UserTypeClassifier(ABC):
    """
    Abstract base class for tagging a company group with a user type.

    The aggregator calls ``classify`` once per group with the group's
    records in input order.
    """

    name: str = "base"

    @abstractmethod
    def classify(self, records: Sequence[UserRecord]) -> str:
        """Return CLIENT_USERS or FIRM_USERS for the group."""
        pass


class FirstRecordClassifier(UserTypeClassifier):
    """
    Tag the whole group from its first record.

    Members are not checked for agreement; a group whose first member is
    a client user is a client group.
    """

    name = "first_record"

    def classify(self, records: Sequence[UserRecord]) -> str:
        if not records:
            return FIRM_USERS
        return tag_record(records[0])


class MajorityVoteClassifier(UserTypeClassifier):
    """Tag the group with its most common member tag (ties: first record)."""

    name = "majority_vote"

    def classify(self, records: Sequence[UserRecord]) -> str:
        if not records:
            return FIRM_USERS
        votes = Counter(tag_record(r) for r in records)
        if votes[CLIENT_USERS] == votes[FIRM_USERS]:
            return tag_record(records[0])
        return votes.most_common(1)[0][0]
