# SPDX-License-Identifier: MIT
"""Run settings and target platform naming."""
