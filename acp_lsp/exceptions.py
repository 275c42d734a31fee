# Copyright 2026 TIER IV, inc.
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

"""Custom exceptions for the ACP language server."""


class AcpLspError(Exception):
    """Base exception for ACP language server errors."""
    pass


class SchemaLoadError(AcpLspError):
    """Exception raised when a bundled schema document cannot be read."""
    pass


class SchemaCompilationError(AcpLspError):
    """Exception raised when a schema document cannot be compiled into a validator."""
    pass


class ConfigurationError(AcpLspError):
    """Exception raised for malformed client settings."""
    pass
