"""Inspector directory: display colour and report recipients per inspector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from adr_checklist.core.config import InspectorSettings

DEFAULT_INSPECTOR_COLOR = "#0F172A"


@dataclass(slots=True, frozen=True)
class InspectorProfile:
    name: str
    color: str = DEFAULT_INSPECTOR_COLOR
    emails: tuple[str, ...] = ()


class InspectorDirectory:
    def __init__(self, profiles: Iterable[InspectorProfile] = ()) -> None:
        self._profiles: dict[str, InspectorProfile] = {}
        for profile in profiles:
            self._profiles[profile.name.strip().lower()] = profile

    @classmethod
    def from_settings(cls, inspectors: Mapping[str, InspectorSettings]) -> "InspectorDirectory":
        return cls(
            InspectorProfile(
                name=name,
                color=entry.color or DEFAULT_INSPECTOR_COLOR,
                emails=tuple(email.strip() for email in entry.emails if email.strip()),
            )
            for name, entry in inspectors.items()
        )

    def get(self, name: Optional[str]) -> InspectorProfile | None:
        if not name:
            return None
        return self._profiles.get(name.strip().lower())

    def color_for(self, name: Optional[str]) -> str:
        profile = self.get(name)
        return profile.color if profile else DEFAULT_INSPECTOR_COLOR

    def recipients_for(self, name: Optional[str]) -> list[str]:
        profile = self.get(name)
        return list(profile.emails) if profile else []

    def names(self) -> list[str]:
        return [profile.name for profile in self._profiles.values()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._profiles)
