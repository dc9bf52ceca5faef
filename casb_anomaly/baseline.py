from __future__ import annotations

from typing import Dict, List, Optional

from .models import BehaviorProfile


class BehaviorBaseline:
    def __init__(self):
        self.profiles: Dict[str, BehaviorProfile] = {}

    def register(self, user: str, usual_country: str) -> BehaviorProfile:
        profile = BehaviorProfile(user=user, usual_country=usual_country)
        self.profiles[user] = profile
        return profile

    def lookup(self, user: str) -> Optional[BehaviorProfile]:
        return self.profiles.get(user)

    def remove(self, user: str) -> None:
        self.profiles.pop(user, None)

    def known_users(self) -> List[str]:
        return list(self.profiles)

    def __len__(self) -> int:
        return len(self.profiles)
