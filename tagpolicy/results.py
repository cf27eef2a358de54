# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Public API return types for tagpolicy.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Domain types (like
    Version) stay with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UpdateDecision:
    """Outcome of evaluating one watched image.

    Attributes:
        image: Image reference as configured (e.g., "karolis/webhook-demo:1.4.5").
        repository: Image reference without the tag.
        current: Current tag.
        candidate: Tag considered for the upgrade, exactly as listed; None if
            no candidate was found.
        policy: Display name of the policy applied.
        should_update: True if the policy allows moving to ``candidate``.
    """

    image: str
    repository: str
    current: str
    candidate: str | None
    policy: str
    should_update: bool

    @property
    def target(self) -> str | None:
        """Image reference to deploy, or None when no update is due."""
        if not self.should_update or self.candidate is None:
            return None
        return f"{self.repository}:{self.candidate}"
