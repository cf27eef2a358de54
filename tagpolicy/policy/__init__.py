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

"""Update policies for tagpolicy.

Modules:

semver : module
    Semver-distance policies (none, all, major, minor, patch).

Public API:

SemverPolicyType : enum
    The policy modes.
SemverPolicy : class
    A policy bound to one mode, with ``should_update(current, new)``.
parse_policy_type : function
    Resolve a mode from its configured name.

Example:
    from tagpolicy.policy import SemverPolicy, parse_policy_type

    policy = SemverPolicy(parse_policy_type("patch"))
    print(policy.should_update("1.2.3", "1.2.9"))  # True
    print(policy.should_update("1.2.3", "1.3.0"))  # False

"""

from .semver import (
    SemverPolicy,
    SemverPolicyType,
    parse_policy_type,
    policy_type_name,
    should_update,
)

__all__ = [
    "SemverPolicy",
    "SemverPolicyType",
    "parse_policy_type",
    "policy_type_name",
    "should_update",
]
