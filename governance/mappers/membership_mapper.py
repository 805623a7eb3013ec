from typing import Any, Dict

from governance.models.membership import MembershipSet


class MembershipMapper(object):
    @staticmethod
    def membership_to_dict(membership: MembershipSet) -> Dict[str, Any]:
        # Sorted so repeated reads print identically
        return {
            "governor_address": membership.governor_address,
            "token": membership.token.model_dump(mode="json"),
            "member_count": membership.member_count,
            "members": sorted(membership.members),
        }
