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

"""Watch file configuration for tagpolicy.

Watch files are YAML documents listing images, their update policy and the
candidate versions to evaluate. Values are layered:

  - Organization-wide defaults (defaults/org.yaml, optional)
  - The watch file's own ``defaults`` mapping
  - Each entry under ``images``

Dicts are merged recursively and lists/scalars are replaced (last wins).

Public API:

- load_watch_config: Load and merge a watch file

Example:
    Basic usage:

        from pathlib import Path
        from tagpolicy.config import load_watch_config

        config = load_watch_config(Path("watch.yaml"))
        for entry in config["images"]:
            print(entry["image"], entry["policy"])

"""

from .loader import load_watch_config

__all__ = ["load_watch_config"]
