"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from enum import Enum


class LoadPolicy(str, Enum):
    """How discovery reacts to a package that fails to load."""

    STOP_ON_FIRST_ERROR = 'stop_on_first_error'
    BEST_EFFORT = 'best_effort'


class ThemePolicy(str, Enum):
    """Which theme becomes active when several themes supply templates."""

    LAST_WINS = 'last_wins'
    FIRST_WINS = 'first_wins'
    EXCLUSIVE = 'exclusive'  # more than one theme with templates is an error
