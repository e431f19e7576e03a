# SPDX-License-Identifier: MIT
"""Textual front end and interaction controllers for the thread panel."""
