# SPDX-License-Identifier: MIT
"""Build state, .dmake files, source discovery and the build actions."""
